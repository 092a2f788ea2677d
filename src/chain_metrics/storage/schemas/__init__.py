"""Storage schemas for time-series data.

All models use Pydantic for validation and serialize to camelCase
for the dashboard.
"""

from .time_series import BulkWriteResult, TimestampGroup, TpsRecord

__all__ = [
    "BulkWriteResult",
    "TimestampGroup",
    "TpsRecord",
]
