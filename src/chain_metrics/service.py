"""
TPS Service
===========

Orchestration boundary used by the HTTP API and the CLI. Delegates to the
update orchestrator, the batch runner and the network aggregator; holds no
state of its own.
"""

from typing import Any

from chain_metrics.aggregation import NetworkAggregator
from chain_metrics.orchestration import (
    BatchHandle,
    BatchRefreshRunner,
    UpdateOrchestrator,
)
from chain_metrics.shared.models import NetworkHistoryPoint, NetworkSnapshot
from chain_metrics.storage.schemas import TpsRecord


def _check_days(days: int) -> None:
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")


class TpsService:
    """Facade over per-chain refreshes, batch refreshes and aggregates."""

    def __init__(
        self,
        orchestrator: UpdateOrchestrator,
        aggregator: NetworkAggregator,
        batch_runner: BatchRefreshRunner,
        default_history_days: int = 7,
        default_chain_history_days: int = 30,
    ):
        self.orchestrator = orchestrator
        self.aggregator = aggregator
        self.batch_runner = batch_runner
        self.default_history_days = default_history_days
        self.default_chain_history_days = default_chain_history_days

    async def refresh_chain(self, chain_id: str) -> dict[str, Any]:
        """
        Refresh one chain and report its newest stored reading.

        Returns:
            Dict with chain_id, outcome, attempts, error and latest
            (latest is None when the refresh failed)
        """
        result = await self.orchestrator.update_one(chain_id)
        latest = None
        if result.succeeded:
            latest = await self.orchestrator.reader.latest(chain_id)
        return {
            "chain_id": chain_id,
            "outcome": result.outcome.value,
            "attempts": result.attempts,
            "error": result.error,
            "latest": latest,
        }

    def start_batch_refresh(self) -> BatchHandle:
        """Accept a batch refresh over the catalog and return at once."""
        return self.batch_runner.submit()

    async def network_snapshot(self) -> NetworkSnapshot:
        return await self.aggregator.snapshot()

    async def network_history(
        self, days: int | None = None
    ) -> list[NetworkHistoryPoint]:
        if days is None:
            days = self.default_history_days
        _check_days(days)
        return await self.aggregator.history(days=days)

    async def chain_history(
        self, chain_id: str, days: int | None = None
    ) -> list[TpsRecord]:
        if days is None:
            days = self.default_chain_history_days
        _check_days(days)
        return await self.orchestrator.get_history(chain_id, days)

    async def chain_latest(self, chain_id: str) -> TpsRecord | None:
        return await self.orchestrator.get_latest(chain_id)
