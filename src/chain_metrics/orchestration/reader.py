"""Read-only access to per-chain TPS series.

TpsReader never writes and never calls the metrics provider; fetch-on-miss
behaviour lives in UpdateOrchestrator.
"""

from collections.abc import Callable

from chain_metrics.common.utils.date_utils import days_ago, unix_now
from chain_metrics.storage.ports import ISeriesStore
from chain_metrics.storage.schemas import TpsRecord

DEFAULT_HISTORY_DAYS = 30


class TpsReader:
    def __init__(self, store: ISeriesStore, clock: Callable[[], int] = unix_now):
        self.store = store
        self.clock = clock

    async def history(
        self, chain_id: str, days: int = DEFAULT_HISTORY_DAYS
    ) -> list[TpsRecord]:
        """Records from the last ``days`` days, newest first."""
        return await self.store.find_since(chain_id, days_ago(self.clock(), days))

    async def latest(self, chain_id: str) -> TpsRecord | None:
        return await self.store.latest_for_chain(chain_id)
