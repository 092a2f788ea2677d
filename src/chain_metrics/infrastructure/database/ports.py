"""
Database adapter interfaces and implementations.
Provides abstraction over database operations for dependency injection.
"""

from typing import Any, Protocol

import asyncpg

from chain_metrics.config.state import DatabaseConfig
from chain_metrics.infrastructure.observability import get_infrastructure_logger

logger = get_infrastructure_logger("database-adapter")


class IDatabaseAdapter(Protocol):
    """
    Protocol defining database operations interface.
    Enables dependency injection and testing with different implementations.
    """

    async def connect(self) -> None:
        """Establish database connection."""
        ...

    async def disconnect(self) -> None:
        """Close database connection."""
        ...

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a statement and return its status tag."""
        ...

    async def fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Fetch single row as dictionary."""
        ...

    async def fetch_all(self, query: str, *args: Any) -> list[dict[str, Any]]:
        """Fetch all rows as list of dictionaries."""
        ...

    async def fetch_value(self, query: str, *args: Any) -> Any:
        """Fetch the first column of the first row."""
        ...

    async def ping(self) -> bool:
        """Return True when a round-trip to the database succeeds."""
        ...


class DatabaseAdapter:
    """
    Concrete implementation over an asyncpg connection pool.

    Each call acquires its own connection, so statements issued by
    concurrent tasks never share a transaction.
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize adapter.

        Args:
            config: Database connection and pool configuration
        """
        self.config = config
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Create the connection pool (idempotent)."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=self.config.url,
            min_size=self.config.min_pool_size,
            max_size=self.config.max_pool_size,
            command_timeout=self.config.command_timeout,
        )
        logger.info(
            "pool_created",
            min_size=self.config.min_pool_size,
            max_size=self.config.max_pool_size,
        )

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("pool_closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database not connected")
        return self._pool

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a statement and return its status tag."""
        async with self._require_pool().acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Fetch single row as dictionary."""
        async with self._require_pool().acquire() as conn:
            row = await conn.fetchrow(query, *args)
            return dict(row) if row else None

    async def fetch_all(self, query: str, *args: Any) -> list[dict[str, Any]]:
        """Fetch all rows as list of dictionaries."""
        async with self._require_pool().acquire() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]

    async def fetch_value(self, query: str, *args: Any) -> Any:
        """Fetch the first column of the first row."""
        async with self._require_pool().acquire() as conn:
            return await conn.fetchval(query, *args)

    async def ping(self) -> bool:
        """Return True when a round-trip to the database succeeds."""
        if self._pool is None:
            return False
        try:
            return await self.fetch_value("SELECT 1") == 1
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("ping_failed", error=str(e))
            return False

    @property
    def pool(self) -> asyncpg.Pool | None:
        """Access underlying connection pool."""
        return self._pool
