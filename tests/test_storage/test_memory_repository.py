"""
Tests for the in-process series store.
"""

from datetime import UTC, datetime, timedelta

import pytest

from chain_metrics.storage.ports import ISeriesStore
from chain_metrics.storage.repositories import InMemoryTpsRepository
from chain_metrics.storage.schemas import TpsRecord


def _record(chain_id, timestamp, value, last_updated=None):
    return TpsRecord(
        chain_id=chain_id,
        timestamp=timestamp,
        value=value,
        last_updated=last_updated,
    )


@pytest.fixture
def seeded(now):
    return InMemoryTpsRepository(
        [
            _record("A", now - 300, 1.0),
            _record("A", now - 100, 2.0),
            _record("A", now - 200, 3.0),
            _record("B", now - 100, 7.0),
            _record("B", now + 500, 9.0),
        ]
    )


class TestUpsertMany:
    def test_satisfies_series_store_protocol(self, store):
        assert isinstance(store, ISeriesStore)

    @pytest.mark.asyncio
    async def test_replay_leaves_single_record(self, store, now):
        records = [_record("A", now - 60, 5.0)]

        first = await store.upsert_many(records)
        second = await store.upsert_many(records)

        assert (first.upserted, first.matched) == (1, 0)
        assert (second.upserted, second.matched, second.modified) == (0, 1, 1)
        assert await store.count_for_chain("A") == 1

    @pytest.mark.asyncio
    async def test_changed_value_updates_in_place(self, store, now):
        written = datetime(2025, 1, 1, tzinfo=UTC)
        await store.upsert_many([_record("A", now, 5.0, written)])

        later = written + timedelta(minutes=30)
        await store.upsert_many([_record("A", now, 6.5, later)])

        latest = await store.latest_for_chain("A")
        assert await store.count_for_chain("A") == 1
        assert latest.value == 6.5
        assert latest.last_updated == later

    @pytest.mark.asyncio
    async def test_missing_last_updated_is_stamped(self, store, now):
        await store.upsert_many([_record("A", now, 1.0)])

        latest = await store.latest_for_chain("A")

        assert latest.last_updated is not None
        assert latest.last_updated.tzinfo is not None


class TestReads:
    @pytest.mark.asyncio
    async def test_find_since_is_newest_first(self, seeded, now):
        records = await seeded.find_since("A", now - 250)

        assert [r.timestamp for r in records] == [now - 100, now - 200]

    @pytest.mark.asyncio
    async def test_latest_for_chain(self, seeded, now):
        assert (await seeded.latest_for_chain("B")).timestamp == now + 500
        assert await seeded.latest_for_chain("missing") is None

    @pytest.mark.asyncio
    async def test_latest_within_window_bounds_inclusive(self, seeded, now):
        record = await seeded.latest_for_chain_within_window("B", now - 100, now)
        assert record.value == 7.0

        record = await seeded.latest_for_chain_within_window("A", now - 300, now - 300)
        assert record.value == 1.0

        assert await seeded.latest_for_chain_within_window("A", now, now + 10) is None

    @pytest.mark.asyncio
    async def test_sum_grouped_by_timestamp(self, seeded, now):
        groups = await seeded.sum_grouped_by_timestamp(["A", "B"], now - 250)

        assert [(g.timestamp, g.total_value, g.chain_count) for g in groups] == [
            (now - 200, 3.0, 1),
            (now - 100, 9.0, 2),
            (now + 500, 9.0, 1),
        ]

    @pytest.mark.asyncio
    async def test_sum_grouped_with_no_chains(self, seeded):
        assert await seeded.sum_grouped_by_timestamp([], 0) == []

    @pytest.mark.asyncio
    async def test_ping_and_schema_are_noops(self, store):
        assert await store.ping() is True
        assert await store.ensure_schema() is None
