"""Time-series data models for storage layer.

Models for:
- TpsRecord: one persisted TPS reading per (chain_id, timestamp)
- BulkWriteResult: outcome of an unordered batch upsert
- TimestampGroup: server-side grouped sum across chains

All models use:
- Pydantic for validation
- Unix seconds (int) for reading timestamps, as reported by the provider
- Timezone-aware UTC datetimes for write times
"""

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class TpsRecord(BaseModel):
    """Average TPS reading for a chain.

    Unique per (chain_id, timestamp); writes are upserts on that key.

    Stored in: metrics.tps
    """

    chain_id: str = Field(..., min_length=1, description="Chain identifier")
    timestamp: int = Field(..., description="Reading time (Unix seconds, UTC)")
    value: float = Field(..., description="Average transactions per second")
    last_updated: datetime | None = Field(
        None, description="When the reading was last written (UTC)"
    )

    class Config:
        """Pydantic configuration."""

        alias_generator = to_camel
        populate_by_name = True

    def to_point(self) -> dict[str, float | int]:
        """Public projection served by history/latest reads."""
        return {"timestamp": self.timestamp, "value": self.value}


class BulkWriteResult(BaseModel):
    """Counts from an unordered batch upsert.

    matched: records whose key already existed
    modified: matched records rewritten (value and last_updated refreshed)
    upserted: records inserted as new keys
    failed: records whose individual write raised
    """

    matched: int = 0
    modified: int = 0
    upserted: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @property
    def applied(self) -> int:
        return self.matched + self.upserted

    @property
    def is_partial(self) -> bool:
        return self.failed > 0 and self.applied > 0


class TimestampGroup(BaseModel):
    """Sum of values across chains sharing one exact timestamp."""

    timestamp: int
    total_value: float
    chain_count: int = Field(..., ge=0)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
