"""Point validation for raw provider readings.

Provides:
- PointValidator: Narrows raw avgTps points to well-formed readings inside
  the trailing ingestion window
- filter_valid: Functional shortcut with the default 30-day window

Validation never raises and never reorders. Rejected points are reported as
events and dropped.
"""

import math
from collections.abc import Iterable
from typing import Any

from chain_metrics.common.utils.date_utils import SECONDS_PER_DAY
from chain_metrics.infrastructure.observability import (
    EventEmitterMixin,
    IEventSink,
    StructlogEventSink,
    get_processing_logger,
)
from chain_metrics.shared.models import MetricPoint

DEFAULT_WINDOW_DAYS = 30


def parse_number(raw: Any) -> float | None:
    """Parse a provider number (JSON number or numeric string).

    Returns None for missing, boolean, non-numeric, NaN and infinite values.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
    elif not isinstance(raw, (int, float)):
        return None
    try:
        number = float(raw)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


class PointValidator(EventEmitterMixin):
    """Filters raw points to the inclusive window [now - window_days, now].

    Checks:
    - Entry is a mapping with numeric timestamp and value
    - Timestamp is not older than the window
    - Timestamp is not in the future (provider clock skew)
    """

    def __init__(
        self,
        window_days: int = DEFAULT_WINDOW_DAYS,
        events: IEventSink | None = None,
    ):
        """Initialize validator.

        Args:
            window_days: Trailing window length in days
            events: Sink for rejection events
        """
        self.window_days = window_days
        self._events = events or StructlogEventSink(
            get_processing_logger("point-validator")
        )

    def window(self, now: int) -> tuple[int, int]:
        """Inclusive (lower, upper) bounds in Unix seconds."""
        return now - self.window_days * SECONDS_PER_DAY, now

    def filter_valid(
        self,
        raw_points: Iterable[Any],
        now: int,
        chain_id: str | None = None,
    ) -> list[MetricPoint]:
        """Return the well-formed, in-window points in input order.

        Args:
            raw_points: Items of the provider ``results`` list
            now: Reference time (Unix seconds)
            chain_id: Chain the points belong to (log context only)

        Returns:
            Validated MetricPoints, a subset of the input
        """
        lower, upper = self.window(now)
        valid: list[MetricPoint] = []

        for item in raw_points:
            if not isinstance(item, dict):
                self._emit(
                    "warning", "tps_point_invalid", chain_id=chain_id, point=repr(item)
                )
                continue

            timestamp = parse_number(item.get("timestamp"))
            value = parse_number(item.get("value"))
            if timestamp is None or value is None:
                self._emit(
                    "warning", "tps_point_invalid", chain_id=chain_id, point=item
                )
                continue

            if not lower <= timestamp <= upper:
                self._emit(
                    "warning",
                    "tps_point_out_of_window",
                    chain_id=chain_id,
                    timestamp=timestamp,
                    value=value,
                    future=timestamp > upper,
                )
                continue

            valid.append(MetricPoint(timestamp=int(timestamp), value=value))

        return valid


def filter_valid(
    raw_points: Iterable[Any],
    now: int,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[MetricPoint]:
    """Validate raw points against the trailing window ending at ``now``."""
    return PointValidator(window_days=window_days).filter_valid(raw_points, now)
