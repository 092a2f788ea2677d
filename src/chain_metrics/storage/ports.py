"""
Storage Layer Protocol Definitions
==================================

Interfaces consumed by orchestration and aggregation. Both the PostgreSQL
repositories and the in-process store satisfy them, so services can be
tested without a live database.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from chain_metrics.storage.schemas import BulkWriteResult, TimestampGroup, TpsRecord


@runtime_checkable
class ISeriesStore(Protocol):
    """Keyed time series (chain_id, timestamp) -> value with idempotent upsert."""

    async def upsert_many(self, records: Sequence[TpsRecord]) -> BulkWriteResult:
        """Apply each record independently (unordered batch)."""
        ...

    async def count_for_chain(self, chain_id: str) -> int:
        ...

    async def latest_for_chain(self, chain_id: str) -> TpsRecord | None:
        ...

    async def find_since(self, chain_id: str, cutoff: int) -> list[TpsRecord]:
        """Records with timestamp >= cutoff, newest first."""
        ...

    async def latest_for_chain_within_window(
        self, chain_id: str, lower: int, upper: int
    ) -> TpsRecord | None:
        """Newest record with lower <= timestamp <= upper."""
        ...

    async def sum_grouped_by_timestamp(
        self, chain_ids: Sequence[str], cutoff: int
    ) -> list[TimestampGroup]:
        """Per-timestamp sum and count over chain_ids, oldest first."""
        ...

    async def ensure_schema(self) -> None:
        ...

    async def ping(self) -> bool:
        ...


@runtime_checkable
class IChainCatalog(Protocol):
    """Read-only view of the externally owned chain list."""

    async def list_chain_ids(self) -> list[str]:
        ...
