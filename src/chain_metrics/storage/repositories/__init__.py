"""Repository module for data access layer.

Implementations of the series store and chain catalog:
- TpsRepository: PostgreSQL series store (via asyncpg)
- InMemoryTpsRepository: in-process series store
- ChainRepository / StaticChainCatalog: chain id sources

All repositories use async/await patterns and protocols for
testability and dependency injection.
"""

from .chains import ChainRepository, StaticChainCatalog
from .memory import InMemoryTpsRepository
from .tps import TpsRepository

__all__ = [
    "ChainRepository",
    "InMemoryTpsRepository",
    "StaticChainCatalog",
    "TpsRepository",
]
