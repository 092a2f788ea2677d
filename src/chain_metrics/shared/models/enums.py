"""
Shared enumerations for chain-metrics.
"""

import enum


class UpdateOutcome(str, enum.Enum):
    """Terminal result of a per-chain update."""

    APPLIED = "applied"
    NO_DATA = "no-data"
    FAILED = "failed"


class UpdateState(str, enum.Enum):
    """States a per-chain update passes through.

    pending -> fetching -> (shape_invalid | network_error -> retry)
            -> validating -> persisting -> applied | no_data
    or failed once attempts are exhausted.
    """

    PENDING = "pending"
    FETCHING = "fetching"
    SHAPE_INVALID = "shape_invalid"
    NETWORK_ERROR = "network_error"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    APPLIED = "applied"
    NO_DATA = "no_data"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {UpdateState.APPLIED, UpdateState.NO_DATA, UpdateState.FAILED}


class BatchStatus(str, enum.Enum):
    """Lifecycle of a batch refresh."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
