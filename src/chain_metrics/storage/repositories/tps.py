"""TPS repository for per-chain throughput persistence.

Provides the series store operations over PostgreSQL.
Writes are unordered batch upserts keyed on (chain_id, ts).

Table Schema:
  metrics.tps:
    - chain_id: TEXT NOT NULL
    - ts: BIGINT NOT NULL (Unix seconds, provider timestamp)
    - value: DOUBLE PRECISION NOT NULL
    - last_updated: TIMESTAMPTZ NOT NULL
    - PRIMARY KEY (chain_id, ts)
"""

import logging
from collections.abc import Sequence

import asyncpg

from chain_metrics.common.utils.date_utils import utc_now
from chain_metrics.infrastructure.database.ports import IDatabaseAdapter
from chain_metrics.storage.schemas import BulkWriteResult, TimestampGroup, TpsRecord

logger = logging.getLogger(__name__)

TPS_TABLE = "metrics.tps"

_SCHEMA_STATEMENTS = (
    "CREATE SCHEMA IF NOT EXISTS metrics",
    f"""
    CREATE TABLE IF NOT EXISTS {TPS_TABLE} (
        chain_id TEXT NOT NULL,
        ts BIGINT NOT NULL,
        value DOUBLE PRECISION NOT NULL,
        last_updated TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (chain_id, ts)
    )
    """,
    f"CREATE INDEX IF NOT EXISTS tps_ts_idx ON {TPS_TABLE} (ts)",
)

# Errors that affect a single statement; anything else propagates
_RECORD_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _row_to_record(row: dict) -> TpsRecord:
    return TpsRecord(
        chain_id=row["chain_id"],
        timestamp=row["ts"],
        value=row["value"],
        last_updated=row.get("last_updated"),
    )


class TpsRepository:
    """Repository for per-chain TPS readings.

    Handles persistence of provider readings to PostgreSQL.
    Each record of a batch is written by its own statement so one failure
    never blocks the rest.
    """

    def __init__(self, db: IDatabaseAdapter):
        """Initialize TPS repository.

        Args:
            db: Database adapter for SQL execution
        """
        self.db = db
        logger.info("TpsRepository initialized")

    async def ensure_schema(self) -> None:
        """Create the table and index when missing."""
        for statement in _SCHEMA_STATEMENTS:
            await self.db.execute(statement)
        logger.info(f"✅ Schema ready: {TPS_TABLE}")

    async def ping(self) -> bool:
        return await self.db.ping()

    async def upsert_many(self, records: Sequence[TpsRecord]) -> BulkWriteResult:
        """Upsert records independently (unordered batch).

        Uses ON CONFLICT on (chain_id, ts). ``xmax = 0`` on the returned row
        distinguishes a fresh insert from an update of an existing key.
        Replaying the same batch only refreshes last_updated.

        Args:
            records: TpsRecords to write

        Returns:
            BulkWriteResult with matched/modified/upserted/failed counts
        """
        query = f"""
            INSERT INTO {TPS_TABLE} (chain_id, ts, value, last_updated)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (chain_id, ts)
            DO UPDATE SET
                value = EXCLUDED.value,
                last_updated = EXCLUDED.last_updated
            RETURNING (xmax = 0) AS inserted
        """

        result = BulkWriteResult()
        for record in records:
            try:
                row = await self.db.fetch_one(
                    query,
                    record.chain_id,
                    record.timestamp,
                    record.value,
                    record.last_updated or utc_now(),
                )
            except _RECORD_ERRORS as e:
                result.failed += 1
                result.errors.append(f"{record.chain_id}@{record.timestamp}: {e}")
                logger.error(
                    f"❌ Upsert failed for {record.chain_id}@{record.timestamp}: {e}"
                )
                continue

            if row and row["inserted"]:
                result.upserted += 1
            else:
                # last_updated always changes, so every match is a modification
                result.matched += 1
                result.modified += 1

        logger.debug(
            f"Upserted {len(records)} TPS records: matched={result.matched} "
            f"upserted={result.upserted} failed={result.failed}"
        )
        return result

    async def count_for_chain(self, chain_id: str) -> int:
        """Get total record count for a chain."""
        query = f"SELECT COUNT(*) FROM {TPS_TABLE} WHERE chain_id = $1"

        try:
            result = await self.db.fetch_value(query, chain_id)
            return result or 0
        except Exception as e:
            logger.error(f"❌ Failed to count TPS records for {chain_id}: {e}")
            raise

    async def latest_for_chain(self, chain_id: str) -> TpsRecord | None:
        """Get the newest record for a chain."""
        query = f"""
            SELECT chain_id, ts, value, last_updated
            FROM {TPS_TABLE}
            WHERE chain_id = $1
            ORDER BY ts DESC
            LIMIT 1
        """

        try:
            row = await self.db.fetch_one(query, chain_id)
            return _row_to_record(row) if row else None
        except Exception as e:
            logger.error(f"❌ Failed to read latest TPS for {chain_id}: {e}")
            raise

    async def find_since(self, chain_id: str, cutoff: int) -> list[TpsRecord]:
        """Get records at or after cutoff.

        Args:
            chain_id: Chain identifier
            cutoff: Lower bound (Unix seconds, inclusive)

        Returns:
            List of TpsRecord sorted by timestamp DESC (newest first)
        """
        query = f"""
            SELECT chain_id, ts, value, last_updated
            FROM {TPS_TABLE}
            WHERE chain_id = $1 AND ts >= $2
            ORDER BY ts DESC
        """

        try:
            rows = await self.db.fetch_all(query, chain_id, cutoff)
            records = [_row_to_record(row) for row in rows]
            logger.debug(f"Found {len(records)} TPS records for {chain_id}")
            return records
        except Exception as e:
            logger.error(f"❌ Failed to find TPS history for {chain_id}: {e}")
            raise

    async def latest_for_chain_within_window(
        self, chain_id: str, lower: int, upper: int
    ) -> TpsRecord | None:
        """Get the newest record with lower <= ts <= upper."""
        query = f"""
            SELECT chain_id, ts, value, last_updated
            FROM {TPS_TABLE}
            WHERE chain_id = $1 AND ts >= $2 AND ts <= $3
            ORDER BY ts DESC
            LIMIT 1
        """

        try:
            row = await self.db.fetch_one(query, chain_id, lower, upper)
            return _row_to_record(row) if row else None
        except Exception as e:
            logger.error(f"❌ Failed to read windowed TPS for {chain_id}: {e}")
            raise

    async def sum_grouped_by_timestamp(
        self, chain_ids: Sequence[str], cutoff: int
    ) -> list[TimestampGroup]:
        """Sum values per exact timestamp across chains.

        Args:
            chain_ids: Chains to include
            cutoff: Lower bound (Unix seconds, inclusive)

        Returns:
            List of TimestampGroup in timestamp order (ASC)
        """
        if not chain_ids:
            return []

        query = f"""
            SELECT ts, SUM(value) AS total_value, COUNT(*) AS chain_count
            FROM {TPS_TABLE}
            WHERE chain_id = ANY($1::text[]) AND ts >= $2
            GROUP BY ts
            ORDER BY ts ASC
        """

        try:
            rows = await self.db.fetch_all(query, list(chain_ids), cutoff)
            return [
                TimestampGroup(
                    timestamp=row["ts"],
                    total_value=row["total_value"],
                    chain_count=row["chain_count"],
                )
                for row in rows
            ]
        except Exception as e:
            logger.error(f"❌ Failed to aggregate TPS by timestamp: {e}")
            raise
