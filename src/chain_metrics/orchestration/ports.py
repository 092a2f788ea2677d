"""
Orchestration Layer Result Types and Protocols
==============================================

Defines the results reported by per-chain updates and batch refreshes, and the
protocols the delivery surfaces (API, CLI) depend on.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from chain_metrics.shared.models import BatchStatus, UpdateOutcome
from chain_metrics.storage.schemas import BulkWriteResult


@dataclass
class UpdateResult:
    """Terminal result of one per-chain update."""

    chain_id: str
    outcome: UpdateOutcome
    attempts: int = 0
    valid_points: int = 0
    write_result: BulkWriteResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome != UpdateOutcome.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "chain_id": self.chain_id,
            "outcome": self.outcome.value,
            "attempts": self.attempts,
            "valid_points": self.valid_points,
            "write_result": (
                self.write_result.model_dump(exclude={"errors"})
                if self.write_result
                else None
            ),
            "error": self.error,
        }


@dataclass
class BatchReport:
    """Summary of a batch refresh over the chain catalog."""

    batch_id: str
    status: BatchStatus = BatchStatus.PENDING
    chains_total: int = 0
    applied: int = 0
    no_data: int = 0
    failed: int = 0
    failed_chains: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    error: str | None = None

    def record(self, result: UpdateResult) -> None:
        """Count one chain's terminal outcome."""
        if result.outcome == UpdateOutcome.APPLIED:
            self.applied += 1
        elif result.outcome == UpdateOutcome.NO_DATA:
            self.no_data += 1
        else:
            self.failed += 1
            self.failed_chains.append(result.chain_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "batch_id": self.batch_id,
            "status": self.status.value,
            "chains_total": self.chains_total,
            "applied": self.applied,
            "no_data": self.no_data,
            "failed": self.failed,
            "failed_chains": self.failed_chains,
            "duration_seconds": self.duration_seconds,
            "error": self.error,
        }


@runtime_checkable
class IUpdateOrchestrator(Protocol):
    """Per-chain refresh with bounded retries.

    Failures are reported in the UpdateResult; only a max_attempts below 1
    raises (ValueError).
    """

    async def update_one(
        self, chain_id: str, max_attempts: int | None = None
    ) -> UpdateResult:
        ...

    async def ensure_fresh(self, chain_id: str) -> UpdateResult | None:
        ...
