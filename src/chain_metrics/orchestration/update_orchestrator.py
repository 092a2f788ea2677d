"""
Update Orchestrator
===================

Coordinates one per-chain refresh: fetch from the metrics provider, validate
the envelope and the points, and upsert into the series store.

Attempt loop (1..max_attempts):
- shape error: logged as ``tps_shape_invalid``, next attempt without sleeping
- fetch or store error: sleep ``attempt * step`` seconds, then retry
- no valid points: ``no-data``, not retried
- points written: ``applied``

After the last failed attempt the outcome is ``failed``. Apart from an
invalid attempt budget, nothing raises out of update_one.
"""

import asyncio
from collections.abc import Awaitable, Callable

from chain_metrics.common.utils.date_utils import unix_now, utc_now
from chain_metrics.infrastructure.observability import (
    EventEmitterMixin,
    IEventSink,
    StructlogEventSink,
    get_pipeline_logger,
)
from chain_metrics.ingestion.adapters.metrics_api import (
    ResponseShapeError,
    ResponseValidator,
    RetryHandler,
)
from chain_metrics.ingestion.ports.metrics import IMetricsClient
from chain_metrics.orchestration.ports import UpdateResult
from chain_metrics.orchestration.reader import DEFAULT_HISTORY_DAYS, TpsReader
from chain_metrics.shared.models import UpdateOutcome, UpdateState
from chain_metrics.storage.exceptions import StoreWriteError
from chain_metrics.storage.ports import ISeriesStore
from chain_metrics.storage.schemas import BulkWriteResult, TpsRecord
from chain_metrics.transformation.validators import PointValidator


class UpdateOrchestrator(EventEmitterMixin):
    """
    Per-chain refresh with bounded retries and linear backoff.

    Stateless between calls: every dependency (clock, sleep, event sink
    included) is injected, so concurrent updates for different chains share
    one instance safely.
    """

    def __init__(
        self,
        metrics_client: IMetricsClient,
        store: ISeriesStore,
        point_validator: PointValidator | None = None,
        retry_handler: RetryHandler | None = None,
        response_validator: ResponseValidator | None = None,
        clock: Callable[[], int] = unix_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        events: IEventSink | None = None,
    ):
        """
        Initialize orchestrator.

        Args:
            metrics_client: Fetches raw avgTps payloads
            store: Series store receiving the upserts
            point_validator: Window/shape filter for raw points
            retry_handler: Attempt budget and backoff delays
            response_validator: Envelope check for provider payloads
            clock: Current time as Unix seconds
            sleep: Awaitable used for backoff waits
            events: Sink for operational events
        """
        self.metrics_client = metrics_client
        self.store = store
        self.clock = clock
        self.sleep = sleep
        self._events = events or StructlogEventSink(
            get_pipeline_logger("update-orchestrator")
        )
        self.point_validator = point_validator or PointValidator(events=self._events)
        self.retry_handler = retry_handler or RetryHandler()
        self.response_validator = response_validator or ResponseValidator()
        self.reader = TpsReader(store, clock=clock)

    async def update_one(
        self, chain_id: str, max_attempts: int | None = None
    ) -> UpdateResult:
        """
        Refresh one chain from the metrics provider.

        Args:
            chain_id: Chain identifier
            max_attempts: Attempt budget (defaults to the retry config)

        Returns:
            UpdateResult with outcome applied, no-data or failed

        Raises:
            ValueError: If max_attempts is below 1 (caller error, checked
                before any work starts)
        """
        budget = (
            self.retry_handler.max_attempts if max_attempts is None else max_attempts
        )
        if budget < 1:
            raise ValueError(f"max_attempts must be at least 1, got {budget}")
        last_error: str | None = None

        for attempt in range(1, budget + 1):
            self._emit(
                "debug",
                "tps_update_attempt",
                chain_id=chain_id,
                attempt=attempt,
                max_attempts=budget,
                state=UpdateState.FETCHING.value,
            )

            try:
                payload = await self.metrics_client.fetch_metrics(chain_id)
                raw_points = self.response_validator.extract_points(payload, chain_id)
            except ResponseShapeError as e:
                last_error = str(e)
                self._emit(
                    "warning",
                    "tps_shape_invalid",
                    chain_id=chain_id,
                    attempt=attempt,
                    state=UpdateState.SHAPE_INVALID.value,
                    error=last_error,
                )
                continue
            except Exception as e:
                last_error = str(e)
                await self._backoff(chain_id, attempt, budget, e)
                continue

            points = self.point_validator.filter_valid(
                raw_points, self.clock(), chain_id=chain_id
            )
            if not points:
                self._emit(
                    "info",
                    "tps_no_data",
                    chain_id=chain_id,
                    attempt=attempt,
                    raw_points=len(raw_points),
                )
                return UpdateResult(
                    chain_id=chain_id, outcome=UpdateOutcome.NO_DATA, attempts=attempt
                )

            try:
                write_result = await self._persist(chain_id, points)
            except Exception as e:
                last_error = str(e)
                await self._backoff(chain_id, attempt, budget, e)
                continue

            self._emit(
                "warning" if write_result.is_partial else "info",
                "tps_update_applied",
                chain_id=chain_id,
                attempt=attempt,
                valid_points=len(points),
                upserted=write_result.upserted,
                modified=write_result.modified,
                failed=write_result.failed,
            )
            return UpdateResult(
                chain_id=chain_id,
                outcome=UpdateOutcome.APPLIED,
                attempts=attempt,
                valid_points=len(points),
                write_result=write_result,
            )

        self._emit(
            "error",
            "tps_update_failed",
            chain_id=chain_id,
            attempts=budget,
            state=UpdateState.FAILED.value,
            error=last_error,
        )
        return UpdateResult(
            chain_id=chain_id,
            outcome=UpdateOutcome.FAILED,
            attempts=budget,
            error=last_error,
        )

    async def _persist(self, chain_id: str, points) -> BulkWriteResult:
        written_at = utc_now()
        records = [
            TpsRecord(
                chain_id=chain_id,
                timestamp=point.timestamp,
                value=point.value,
                last_updated=written_at,
            )
            for point in points
        ]
        result = await self.store.upsert_many(records)
        if result.failed and not result.applied:
            raise StoreWriteError(
                f"All {result.failed} records failed to write for {chain_id}",
                errors=result.errors,
            )
        return result

    async def _backoff(
        self, chain_id: str, attempt: int, budget: int, error: Exception
    ) -> None:
        if not self.retry_handler.has_attempts_left(attempt, budget):
            self._emit(
                "warning",
                "tps_attempt_failed",
                chain_id=chain_id,
                attempt=attempt,
                state=UpdateState.NETWORK_ERROR.value,
                error=str(error),
            )
            return

        delay = self.retry_handler.get_retry_delay(attempt)
        self._emit(
            "warning",
            "tps_attempt_failed",
            chain_id=chain_id,
            attempt=attempt,
            state=UpdateState.NETWORK_ERROR.value,
            error=str(error),
            retry_in_seconds=delay,
        )
        await self.sleep(delay)

    async def ensure_fresh(self, chain_id: str) -> UpdateResult | None:
        """Run update_one only when the store holds nothing for the chain."""
        if await self.store.count_for_chain(chain_id) > 0:
            return None
        self._emit("info", "tps_fill_on_miss", chain_id=chain_id)
        return await self.update_one(chain_id)

    async def get_history(
        self, chain_id: str, days: int = DEFAULT_HISTORY_DAYS
    ) -> list[TpsRecord]:
        """History for the last ``days`` days, fetching first when empty."""
        await self.ensure_fresh(chain_id)
        return await self.reader.history(chain_id, days)

    async def get_latest(self, chain_id: str) -> TpsRecord | None:
        """Newest record, fetching once and re-reading when none is stored."""
        record = await self.reader.latest(chain_id)
        if record is not None:
            return record
        await self.update_one(chain_id)
        return await self.reader.latest(chain_id)
