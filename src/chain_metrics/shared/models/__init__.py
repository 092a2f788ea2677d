from .enums import BatchStatus, UpdateOutcome, UpdateState
from .metrics import MetricPoint, NetworkHistoryPoint, NetworkSnapshot

__all__ = [
    "BatchStatus",
    "MetricPoint",
    "NetworkHistoryPoint",
    "NetworkSnapshot",
    "UpdateOutcome",
    "UpdateState",
]
