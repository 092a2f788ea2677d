"""
Orchestration layer: per-chain refresh with retries, fetch-on-miss reads and
batch refreshes over the chain catalog.
"""

from .batch import BatchHandle, BatchRefreshRunner
from .ports import BatchReport, IUpdateOrchestrator, UpdateResult
from .reader import TpsReader
from .update_orchestrator import UpdateOrchestrator

__all__ = [
    "BatchHandle",
    "BatchRefreshRunner",
    "BatchReport",
    "IUpdateOrchestrator",
    "TpsReader",
    "UpdateOrchestrator",
    "UpdateResult",
]
