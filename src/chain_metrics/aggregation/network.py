"""
Network Aggregator
==================

Network-wide TPS derived from the per-chain series:

- snapshot: sum of each chain's newest reading inside the trailing 24 h
- history: per-timestamp sums across all catalog chains

Results are computed on every call and never persisted. Store read failures
propagate to the caller.
"""

import asyncio
import math
from collections.abc import Callable, Sequence

from chain_metrics.common.utils.date_utils import (
    SECONDS_PER_MINUTE,
    days_ago,
    to_iso_z,
    unix_now,
)
from chain_metrics.infrastructure.observability import (
    EventEmitterMixin,
    IEventSink,
    StructlogEventSink,
    get_processing_logger,
)
from chain_metrics.shared.models import NetworkHistoryPoint, NetworkSnapshot
from chain_metrics.storage.ports import IChainCatalog, ISeriesStore
from chain_metrics.storage.schemas import TpsRecord

DEFAULT_SNAPSHOT_WINDOW_SECONDS = 24 * 60 * 60
DEFAULT_STALE_AFTER_MINUTES = 24 * 60
DEFAULT_HISTORY_DAYS = 7


class NetworkAggregator(EventEmitterMixin):
    """Computes network snapshots and history from the series store."""

    def __init__(
        self,
        store: ISeriesStore,
        catalog: IChainCatalog,
        clock: Callable[[], int] = unix_now,
        events: IEventSink | None = None,
        snapshot_window_seconds: int = DEFAULT_SNAPSHOT_WINDOW_SECONDS,
        stale_after_minutes: int = DEFAULT_STALE_AFTER_MINUTES,
    ):
        """
        Initialize aggregator.

        Args:
            store: Series store to read from
            catalog: Source of chain ids when none are given
            clock: Current time as Unix seconds
            events: Sink for anomaly events
            snapshot_window_seconds: Trailing window for snapshot readings
            stale_after_minutes: Data age above which a snapshot is flagged
        """
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.snapshot_window_seconds = snapshot_window_seconds
        self.stale_after_minutes = stale_after_minutes
        self._events = events or StructlogEventSink(
            get_processing_logger("network-aggregator")
        )

    async def snapshot(
        self,
        chain_ids: Sequence[str] | None = None,
        now: int | None = None,
    ) -> NetworkSnapshot:
        """
        Sum the newest in-window reading of each chain.

        Args:
            chain_ids: Chains to include (defaults to the catalog)
            now: Reference time (defaults to the clock)

        Returns:
            NetworkSnapshot; zeroed when no chain has an in-window reading
        """
        now = self.clock() if now is None else now
        if chain_ids is None:
            chain_ids = await self.catalog.list_chain_ids()
        lower = now - self.snapshot_window_seconds

        latest = await asyncio.gather(
            *(
                self.store.latest_for_chain_within_window(chain_id, lower, now)
                for chain_id in chain_ids
            )
        )
        readings = [
            record
            for record in latest
            if record is not None and self._in_window(record, lower, now)
        ]

        if not readings:
            self._emit("warning", "tps_snapshot_empty", chains_checked=len(chain_ids))
            return NetworkSnapshot(
                total_tps=0,
                chain_count=0,
                timestamp=now,
                data_age=0,
                updated_at=to_iso_z(now),
                last_update=None,
            )

        timestamp = max(record.timestamp for record in readings)
        data_age = max(0, math.floor((now - timestamp) / SECONDS_PER_MINUTE))
        if data_age > self.stale_after_minutes:
            self._emit(
                "warning",
                "tps_snapshot_stale",
                data_age_minutes=data_age,
                data_age_hours=round(data_age / 60, 1),
            )

        return NetworkSnapshot(
            total_tps=round(sum(record.value for record in readings), 2),
            chain_count=len(readings),
            timestamp=timestamp,
            data_age=data_age,
            updated_at=to_iso_z(now),
            last_update=to_iso_z(timestamp),
        )

    def _in_window(self, record: TpsRecord, lower: int, now: int) -> bool:
        if record.timestamp > now:
            self._emit(
                "warning",
                "tps_future_timestamp",
                chain_id=record.chain_id,
                timestamp=record.timestamp,
                now=now,
            )
            return False
        return record.timestamp >= lower

    async def history(
        self, days: int = DEFAULT_HISTORY_DAYS, now: int | None = None
    ) -> list[NetworkHistoryPoint]:
        """
        Network TPS per exact provider timestamp over the last ``days`` days.

        Args:
            days: Look-back in days
            now: Reference time (defaults to the clock)

        Returns:
            NetworkHistoryPoints in timestamp order
        """
        now = self.clock() if now is None else now
        chain_ids = await self.catalog.list_chain_ids()
        groups = await self.store.sum_grouped_by_timestamp(
            chain_ids, days_ago(now, days)
        )

        return [
            NetworkHistoryPoint(
                timestamp=group.timestamp,
                total_tps=round(group.total_value, 2),
                chain_count=group.chain_count,
                date=to_iso_z(group.timestamp),
            )
            for group in groups
        ]
