"""Storage layer for chain-metrics.

Central abstraction for data persistence:
- Time-series data: per-chain TPS readings keyed on (chain_id, timestamp)
- Chain catalog: read-only list of known chains

Architecture:

    ┌─────────────────────────────────────┐
    │ Application Layer                   │
    │ (Orchestration, Aggregation)        │
    └──────────────┬──────────────────────┘
                   │  ISeriesStore / IChainCatalog
    ┌──────────────▼──────────────────────┐
    │ Storage Layer (THIS MODULE)         │
    │                                     │
    │  Repositories:                      │
    │  - TpsRepository (PostgreSQL)       │
    │  - InMemoryTpsRepository            │
    │  - ChainRepository                  │
    │  - StaticChainCatalog               │
    └──────────────┬──────────────────────┘
                   │
    ┌──────────────▼──────────────────────┐
    │ Infrastructure Layer                │
    │ - PostgreSQL (asyncpg pool)         │
    └─────────────────────────────────────┘

Key Design Principles:

1. **Protocol-Based**: services depend on ISeriesStore, not a backend
2. **Async/Await**: all I/O operations are async-first
3. **Unordered Batches**: one record's failure never blocks the others
4. **Idempotent**: upsert semantics absorb replays and concurrent writers
"""

from .exceptions import StoreError, StoreWriteError
from .ports import IChainCatalog, ISeriesStore

__all__ = [
    "IChainCatalog",
    "ISeriesStore",
    "StoreError",
    "StoreWriteError",
]
