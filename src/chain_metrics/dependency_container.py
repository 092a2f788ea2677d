"""
Dependency injection container for the TPS pipeline.

Wires together:
- HTTP client (aiohttp wrapper)
- Metrics client (avgTps endpoint)
- Response validator, point validator, retry handler
- Series store (PostgreSQL or in-process) and chain catalog
- Update orchestrator, batch refresh runner, network aggregator
- TpsService facade

Single place where concrete implementations are chosen. Components are built
once per container and shared, so the API lifespan and the CLI each own one
container and close it on exit.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from chain_metrics.aggregation import NetworkAggregator
from chain_metrics.common.utils.date_utils import unix_now
from chain_metrics.config.state import ConfigState
from chain_metrics.infrastructure.database.ports import DatabaseAdapter
from chain_metrics.infrastructure.observability import IEventSink
from chain_metrics.ingestion.adapters.metrics_api import (
    MetricsClient,
    ResponseValidator,
    RetryHandler,
)
from chain_metrics.ingestion.config.value_objects import MetricsApiConfig, RetryConfig
from chain_metrics.ingestion.connectors.aiohttp_client import AiohttpClient
from chain_metrics.ingestion.ports.http import IHttpClient
from chain_metrics.ingestion.ports.metrics import IMetricsClient
from chain_metrics.orchestration import BatchRefreshRunner, UpdateOrchestrator
from chain_metrics.service import TpsService
from chain_metrics.storage.ports import IChainCatalog, ISeriesStore
from chain_metrics.storage.repositories import (
    ChainRepository,
    InMemoryTpsRepository,
    StaticChainCatalog,
    TpsRepository,
)
from chain_metrics.transformation.validators import PointValidator

logger = logging.getLogger(__name__)


class ChainMetricsContainer:
    """
    Composition root for the TPS pipeline.

    Usage:
        container = ChainMetricsContainer(get_settings())
        await container.start()
        service = container.service
        ...
        await container.close()

    Any collaborator can be passed in to replace the configured one
    (tests inject fakes for the HTTP client, store, clock and sleep).
    """

    def __init__(
        self,
        state: ConfigState,
        http_client: IHttpClient | None = None,
        metrics_client: IMetricsClient | None = None,
        store: ISeriesStore | None = None,
        catalog: IChainCatalog | None = None,
        clock: Callable[[], int] = unix_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        events: IEventSink | None = None,
    ):
        self.state = state
        self.clock = clock
        self.sleep = sleep
        self.events = events

        self.metrics_config = MetricsApiConfig.from_state(state)
        self.retry_config = RetryConfig(
            max_attempts=state.update.max_attempts,
            backoff_step_seconds=state.update.backoff_step_seconds,
        )

        self.db: DatabaseAdapter | None = None
        if store is None and state.storage.backend == "postgres":
            self.db = DatabaseAdapter(state.database)

        self.http_client = http_client or AiohttpClient(self.metrics_config.http_config)
        self.metrics_client = metrics_client or MetricsClient(
            config=self.metrics_config, http_client=self.http_client
        )
        self.store = store or self._create_store()
        self.catalog = catalog or self._create_catalog()

        self.orchestrator = self.create_orchestrator()
        self.aggregator = self.create_aggregator()
        self.batch_runner = self.create_batch_runner()
        self.service = TpsService(
            orchestrator=self.orchestrator,
            aggregator=self.aggregator,
            batch_runner=self.batch_runner,
            default_history_days=state.aggregation.default_history_days,
            default_chain_history_days=state.aggregation.default_chain_history_days,
        )

        logger.info(
            f"ChainMetricsContainer initialized (storage={state.storage.backend})"
        )

    # ==================== Storage ====================

    def _create_store(self) -> ISeriesStore:
        if self.db is None:
            return InMemoryTpsRepository()
        return TpsRepository(self.db)

    def _create_catalog(self) -> IChainCatalog:
        static_ids = self.state.storage.static_chain_ids
        if static_ids or self.db is None:
            return StaticChainCatalog(static_ids)
        return ChainRepository(self.db)

    # ==================== Pipeline ====================

    def create_point_validator(self) -> PointValidator:
        return PointValidator(
            window_days=self.state.update.ingestion_window_days, events=self.events
        )

    def create_orchestrator(self) -> UpdateOrchestrator:
        return UpdateOrchestrator(
            metrics_client=self.metrics_client,
            store=self.store,
            point_validator=self.create_point_validator(),
            retry_handler=RetryHandler(self.retry_config),
            response_validator=ResponseValidator(),
            clock=self.clock,
            sleep=self.sleep,
            events=self.events,
        )

    def create_aggregator(self) -> NetworkAggregator:
        return NetworkAggregator(
            store=self.store,
            catalog=self.catalog,
            clock=self.clock,
            events=self.events,
            snapshot_window_seconds=self.state.aggregation.snapshot_window_seconds,
            stale_after_minutes=self.state.aggregation.stale_after_minutes,
        )

    def create_batch_runner(self) -> BatchRefreshRunner:
        return BatchRefreshRunner(
            orchestrator=self.orchestrator,
            catalog=self.catalog,
            max_concurrency=self.state.update.max_concurrency,
            events=self.events,
        )

    # ==================== Lifecycle ====================

    async def start(self, ensure_schema: bool = False) -> None:
        """Open the database pool (postgres backend) and optionally create tables."""
        if self.db is not None:
            await self.db.connect()
        if ensure_schema:
            await self.store.ensure_schema()

    async def close(self) -> None:
        """Drain running batches, then release HTTP and database resources."""
        await self.batch_runner.drain()
        await self.http_client.close()
        if self.db is not None:
            await self.db.disconnect()
        logger.info("ChainMetricsContainer closed")
