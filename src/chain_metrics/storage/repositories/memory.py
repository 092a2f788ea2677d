"""In-process series store.

Same contract as TpsRepository, kept in a dict keyed on (chain_id, timestamp).
Backs the ``memory`` storage backend (local runs, demos) and service tests.
Data is lost when the process exits.
"""

from collections.abc import Sequence

from chain_metrics.common.utils.date_utils import utc_now
from chain_metrics.storage.schemas import BulkWriteResult, TimestampGroup, TpsRecord


class InMemoryTpsRepository:
    """Dict-backed implementation of ISeriesStore."""

    def __init__(self, records: Sequence[TpsRecord] = ()):
        self._rows: dict[tuple[str, int], TpsRecord] = {}
        for record in records:
            self._rows[(record.chain_id, record.timestamp)] = record

    def __len__(self) -> int:
        return len(self._rows)

    async def ensure_schema(self) -> None:
        return None

    async def ping(self) -> bool:
        return True

    async def upsert_many(self, records: Sequence[TpsRecord]) -> BulkWriteResult:
        result = BulkWriteResult()
        for record in records:
            key = (record.chain_id, record.timestamp)
            stored = record.model_copy(
                update={"last_updated": record.last_updated or utc_now()}
            )
            if key in self._rows:
                result.matched += 1
                result.modified += 1
            else:
                result.upserted += 1
            self._rows[key] = stored
        return result

    def _for_chain(self, chain_id: str) -> list[TpsRecord]:
        return [r for (cid, _), r in self._rows.items() if cid == chain_id]

    async def count_for_chain(self, chain_id: str) -> int:
        return len(self._for_chain(chain_id))

    async def latest_for_chain(self, chain_id: str) -> TpsRecord | None:
        rows = self._for_chain(chain_id)
        return max(rows, key=lambda r: r.timestamp) if rows else None

    async def find_since(self, chain_id: str, cutoff: int) -> list[TpsRecord]:
        rows = [r for r in self._for_chain(chain_id) if r.timestamp >= cutoff]
        return sorted(rows, key=lambda r: r.timestamp, reverse=True)

    async def latest_for_chain_within_window(
        self, chain_id: str, lower: int, upper: int
    ) -> TpsRecord | None:
        rows = [
            r for r in self._for_chain(chain_id) if lower <= r.timestamp <= upper
        ]
        return max(rows, key=lambda r: r.timestamp) if rows else None

    async def sum_grouped_by_timestamp(
        self, chain_ids: Sequence[str], cutoff: int
    ) -> list[TimestampGroup]:
        wanted = set(chain_ids)
        groups: dict[int, list[float]] = {}
        for (chain_id, timestamp), record in self._rows.items():
            if chain_id in wanted and timestamp >= cutoff:
                groups.setdefault(timestamp, []).append(record.value)

        return [
            TimestampGroup(
                timestamp=ts, total_value=sum(values), chain_count=len(values)
            )
            for ts, values in sorted(groups.items())
        ]
