"""Chain catalog access.

Chains are owned by an external catalog (chain metadata sync is not part of
this pipeline). The pipeline only needs the list of known chain ids.
"""

from collections.abc import Iterable

from chain_metrics.infrastructure.database.ports import IDatabaseAdapter
from chain_metrics.infrastructure.observability import get_storage_logger

logger = get_storage_logger("chain-catalog")

CHAINS_TABLE = "catalog.chains"


class ChainRepository:
    """Reads chain ids from the catalog table."""

    def __init__(self, db: IDatabaseAdapter, table: str = CHAINS_TABLE):
        self.db = db
        self.table = table

    async def list_chain_ids(self) -> list[str]:
        query = f"SELECT chain_id FROM {self.table} ORDER BY chain_id"

        try:
            rows = await self.db.fetch_all(query)
        except Exception as e:
            logger.error("chain_list_failed", table=self.table, error=str(e))
            raise

        chain_ids = [row["chain_id"] for row in rows if row.get("chain_id")]
        logger.debug("chains_listed", table=self.table, count=len(chain_ids))
        return chain_ids


class StaticChainCatalog:
    """Fixed chain list from configuration."""

    def __init__(self, chain_ids: Iterable[str]):
        # Preserve order, drop duplicates and blanks
        self._chain_ids = list(dict.fromkeys(c for c in chain_ids if c))

    async def list_chain_ids(self) -> list[str]:
        return list(self._chain_ids)
