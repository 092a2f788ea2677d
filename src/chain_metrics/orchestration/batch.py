"""
Batch Refresh Runner
====================

Refreshes every catalog chain as one tracked background task.

submit() returns a BatchHandle at once; the caller can poll ``done()`` or
``await wait()`` for the BatchReport. Per-chain failures are counted in the
report and never propagate.
"""

import asyncio
import time
import uuid
from collections.abc import Sequence

from chain_metrics.infrastructure.observability import (
    EventEmitterMixin,
    IEventSink,
    StructlogEventSink,
    get_pipeline_logger,
)
from chain_metrics.orchestration.ports import (
    BatchReport,
    IUpdateOrchestrator,
    UpdateResult,
)
from chain_metrics.shared.models import BatchStatus, UpdateOutcome
from chain_metrics.storage.ports import IChainCatalog

DEFAULT_MAX_CONCURRENCY = 5


class BatchHandle:
    """Completion handle for a submitted batch refresh."""

    def __init__(self, batch_id: str, task: "asyncio.Task[BatchReport]"):
        self.batch_id = batch_id
        self._task = task

    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> BatchReport:
        """Wait for the batch to finish and return its report."""
        return await asyncio.shield(self._task)

    def report(self) -> BatchReport | None:
        """Report of a finished batch, None while running."""
        if not self._task.done() or self._task.cancelled():
            return None
        return self._task.result()


class BatchRefreshRunner(EventEmitterMixin):
    """
    Runs update_one for every chain, bounded by a semaphore.

    Submitted batches are held in a task set until they finish so they are
    not garbage collected mid-flight and can be drained on shutdown.
    """

    def __init__(
        self,
        orchestrator: IUpdateOrchestrator,
        catalog: IChainCatalog,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        events: IEventSink | None = None,
    ):
        self.orchestrator = orchestrator
        self.catalog = catalog
        self.max_concurrency = max(1, max_concurrency)
        self._events = events or StructlogEventSink(
            get_pipeline_logger("batch-refresh")
        )
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def submit(self, chain_ids: Sequence[str] | None = None) -> BatchHandle:
        """
        Start a batch refresh in the background.

        Must be called from a running event loop.

        Args:
            chain_ids: Chains to refresh (defaults to the whole catalog)

        Returns:
            BatchHandle for the scheduled batch
        """
        batch_id = uuid.uuid4().hex[:12]
        task = asyncio.create_task(self.run(chain_ids, batch_id=batch_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._emit("info", "tps_batch_accepted", batch_id=batch_id)
        return BatchHandle(batch_id, task)

    async def run(
        self,
        chain_ids: Sequence[str] | None = None,
        batch_id: str | None = None,
    ) -> BatchReport:
        """Refresh the chains and return the report. Never raises."""
        report = BatchReport(
            batch_id=batch_id or uuid.uuid4().hex[:12], status=BatchStatus.RUNNING
        )
        started = time.monotonic()

        try:
            targets = (
                list(chain_ids)
                if chain_ids is not None
                else await self.catalog.list_chain_ids()
            )
        except Exception as e:
            report.status = BatchStatus.FAILED
            report.error = f"Failed to list chains: {e}"
            report.duration_seconds = round(time.monotonic() - started, 3)
            self._emit(
                "error",
                "tps_batch_failed",
                batch_id=report.batch_id,
                error=report.error,
            )
            return report

        report.chains_total = len(targets)
        self._emit(
            "info",
            "tps_batch_started",
            batch_id=report.batch_id,
            chains_total=report.chains_total,
            max_concurrency=self.max_concurrency,
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def refresh(chain_id: str) -> UpdateResult:
            async with semaphore:
                return await self.orchestrator.update_one(chain_id)

        results = await asyncio.gather(
            *(refresh(chain_id) for chain_id in targets), return_exceptions=True
        )

        for chain_id, result in zip(targets, results):
            if isinstance(result, Exception):
                self._emit(
                    "error",
                    "tps_batch_chain_error",
                    batch_id=report.batch_id,
                    chain_id=chain_id,
                    error=str(result),
                )
                result = UpdateResult(
                    chain_id=chain_id, outcome=UpdateOutcome.FAILED, error=str(result)
                )
            report.record(result)

        report.status = BatchStatus.SUCCESS
        report.duration_seconds = round(time.monotonic() - started, 3)
        self._emit(
            "warning" if report.failed else "info",
            "tps_batch_completed",
            batch_id=report.batch_id,
            chains_total=report.chains_total,
            applied=report.applied,
            no_data=report.no_data,
            failed=report.failed,
            failed_chains=report.failed_chains,
            duration_seconds=report.duration_seconds,
        )
        return report

    async def drain(self) -> None:
        """Wait for every submitted batch to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
