"""
Per-chain throughput telemetry pipeline.
Ingests TPS series from the metrics provider and derives network aggregates.

Modules:
- ingestion: Metrics provider client and response validation
- transformation: Point validation against the ingestion window
- storage: Time-series store (PostgreSQL or in-process) and chain catalog
- orchestration: Per-chain update with retries, batch refresh, reads
- aggregation: Network snapshot and history rollups
- infrastructure: Config, database, logging
"""

__version__ = "0.1.0"
