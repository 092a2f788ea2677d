"""
Tests for the PostgreSQL repositories with a mocked database adapter.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from chain_metrics.storage.repositories import (
    ChainRepository,
    StaticChainCatalog,
    TpsRepository,
)
from chain_metrics.storage.schemas import TpsRecord

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def mock_db():
    """Mock database adapter"""
    db = MagicMock()
    db.execute = AsyncMock(return_value="OK")
    db.fetch_one = AsyncMock(return_value=None)
    db.fetch_all = AsyncMock(return_value=[])
    db.fetch_value = AsyncMock(return_value=0)
    db.ping = AsyncMock(return_value=True)
    return db


@pytest.fixture
def records(now):
    written = datetime(2025, 6, 15, tzinfo=UTC)
    return [
        TpsRecord(chain_id="A", timestamp=now - 200, value=1.0, last_updated=written),
        TpsRecord(chain_id="A", timestamp=now - 100, value=2.0, last_updated=written),
        TpsRecord(chain_id="A", timestamp=now, value=3.0, last_updated=written),
    ]


# ============================================================================
# TpsRepository
# ============================================================================


class TestTpsRepositoryWrites:
    @pytest.mark.asyncio
    async def test_upsert_counts_inserts_and_updates(self, mock_db, records):
        mock_db.fetch_one.side_effect = [
            {"inserted": True},
            {"inserted": False},
            {"inserted": True},
        ]
        repo = TpsRepository(mock_db)

        result = await repo.upsert_many(records)

        assert result.upserted == 2
        assert result.matched == 1
        assert result.modified == 1
        assert result.failed == 0
        assert mock_db.fetch_one.await_count == 3

    @pytest.mark.asyncio
    async def test_record_failure_does_not_block_others(self, mock_db, records):
        mock_db.fetch_one.side_effect = [
            {"inserted": True},
            OSError("connection reset"),
            {"inserted": True},
        ]
        repo = TpsRepository(mock_db)

        result = await repo.upsert_many(records)

        assert result.upserted == 2
        assert result.failed == 1
        assert result.is_partial
        assert "connection reset" in result.errors[0]

    @pytest.mark.asyncio
    async def test_upsert_passes_key_value_and_write_time(self, mock_db, records):
        mock_db.fetch_one.return_value = {"inserted": True}
        repo = TpsRepository(mock_db)

        await repo.upsert_many(records[:1])

        query, *args = mock_db.fetch_one.await_args.args
        assert "ON CONFLICT (chain_id, ts)" in query
        assert args == ["A", records[0].timestamp, 1.0, records[0].last_updated]

    @pytest.mark.asyncio
    async def test_ensure_schema_creates_table(self, mock_db):
        repo = TpsRepository(mock_db)

        await repo.ensure_schema()

        statements = [c.args[0] for c in mock_db.execute.await_args_list]
        assert any("CREATE TABLE IF NOT EXISTS metrics.tps" in s for s in statements)
        assert any("PRIMARY KEY (chain_id, ts)" in s for s in statements)


class TestTpsRepositoryReads:
    @pytest.mark.asyncio
    async def test_find_since_maps_rows(self, mock_db, now):
        mock_db.fetch_all.return_value = [
            {"chain_id": "A", "ts": now, "value": 4.2, "last_updated": None},
            {"chain_id": "A", "ts": now - 60, "value": 3.1, "last_updated": None},
        ]
        repo = TpsRepository(mock_db)

        result = await repo.find_since("A", now - 3600)

        assert [r.timestamp for r in result] == [now, now - 60]
        assert mock_db.fetch_all.await_args.args[1:] == ("A", now - 3600)

    @pytest.mark.asyncio
    async def test_latest_for_chain_none(self, mock_db):
        repo = TpsRepository(mock_db)

        assert await repo.latest_for_chain("A") is None

    @pytest.mark.asyncio
    async def test_latest_within_window_passes_bounds(self, mock_db, now):
        mock_db.fetch_one.return_value = {
            "chain_id": "A",
            "ts": now - 5,
            "value": 9.0,
            "last_updated": None,
        }
        repo = TpsRepository(mock_db)

        record = await repo.latest_for_chain_within_window("A", now - 86400, now)

        assert record.value == 9.0
        assert mock_db.fetch_one.await_args.args[1:] == ("A", now - 86400, now)

    @pytest.mark.asyncio
    async def test_count_for_chain(self, mock_db):
        mock_db.fetch_value.return_value = 12
        repo = TpsRepository(mock_db)

        assert await repo.count_for_chain("A") == 12

    @pytest.mark.asyncio
    async def test_sum_grouped_by_timestamp(self, mock_db, now):
        mock_db.fetch_all.return_value = [
            {"ts": now - 86400, "total_value": 12.0, "chain_count": 2},
        ]
        repo = TpsRepository(mock_db)

        groups = await repo.sum_grouped_by_timestamp(("A", "B"), now - 7 * 86400)

        assert groups[0].total_value == 12.0
        assert groups[0].chain_count == 2
        assert mock_db.fetch_all.await_args.args[1] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_sum_grouped_without_chains_skips_query(self, mock_db):
        repo = TpsRepository(mock_db)

        assert await repo.sum_grouped_by_timestamp([], 0) == []
        mock_db.fetch_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_read_errors_propagate(self, mock_db):
        mock_db.fetch_all.side_effect = RuntimeError("Database not connected")
        repo = TpsRepository(mock_db)

        with pytest.raises(RuntimeError):
            await repo.find_since("A", 0)


# ============================================================================
# Chain catalog
# ============================================================================


class TestChainCatalog:
    @pytest.mark.asyncio
    async def test_chain_repository_lists_ids(self, mock_db):
        mock_db.fetch_all.return_value = [
            {"chain_id": "A"},
            {"chain_id": None},
            {"chain_id": "B"},
        ]

        assert await ChainRepository(mock_db).list_chain_ids() == ["A", "B"]

    @pytest.mark.asyncio
    async def test_static_catalog_dedupes(self):
        catalog = StaticChainCatalog(["A", "", "B", "A"])

        assert await catalog.list_chain_ids() == ["A", "B"]
