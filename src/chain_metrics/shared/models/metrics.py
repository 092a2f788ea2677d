"""Domain models for TPS points and network aggregates.

MetricPoint is the validated, in-flight form of a provider point.
NetworkSnapshot and NetworkHistoryPoint are derived on every call and never
persisted. All serialize to camelCase for the dashboard.
"""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class MetricPoint(BaseModel):
    """Validated provider point, not yet persisted."""

    timestamp: int = Field(..., description="Reading time (Unix seconds, UTC)")
    value: float = Field(..., description="Average transactions per second")

    class Config:
        frozen = True


class NetworkSnapshot(BaseModel):
    """Sum of each chain's latest in-window reading."""

    total_tps: float = 0.0
    chain_count: int = Field(0, ge=0)
    timestamp: int = Field(..., description="Most recent reading used (Unix seconds)")
    data_age: int = Field(0, ge=0, description="Minutes between now and timestamp")
    data_age_unit: Literal["minutes"] = "minutes"
    updated_at: str = Field(
        ..., description="When the snapshot was computed (ISO-8601)"
    )
    last_update: str | None = Field(
        None, description="ISO-8601 of timestamp; null when no chain had data"
    )

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class NetworkHistoryPoint(BaseModel):
    """Network-wide TPS at one exact provider timestamp."""

    timestamp: int
    total_tps: float
    chain_count: int = Field(..., ge=0)
    date: str = Field(..., description="ISO-8601 of timestamp")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
