"""
Date Utilities
==============

Unix-second helpers used by the ingestion window, the store and the aggregates.
Provider timestamps are whole seconds since the epoch, UTC.
"""

import time
from datetime import UTC, datetime

SECONDS_PER_MINUTE = 60
SECONDS_PER_DAY = 24 * 60 * 60


def unix_now() -> int:
    """
    Get current time as whole Unix seconds.

    Returns:
        Seconds since the epoch (UTC), truncated
    """
    return int(time.time())


def utc_now() -> datetime:
    """
    Get current time in UTC.

    Returns:
        Current timezone-aware UTC datetime
    """
    return datetime.now(UTC)


def from_unix_seconds(timestamp: int | float) -> datetime:
    """
    Convert Unix seconds to a timezone-aware UTC datetime.

    Args:
        timestamp: Seconds since the epoch

    Returns:
        Datetime in UTC
    """
    return datetime.fromtimestamp(timestamp, tz=UTC)


def to_iso_z(value: int | float | datetime) -> str:
    """
    Render Unix seconds or a datetime as ISO-8601 UTC with millisecond precision.

    Example:
        >>> to_iso_z(0)
        '1970-01-01T00:00:00.000Z'
    """
    dt = value if isinstance(value, datetime) else from_unix_seconds(value)
    if dt.tzinfo is None:
        # Assume UTC for naive datetimes
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def days_ago(now: int, days: int | float) -> int:
    """Return the Unix-second cutoff ``days`` before ``now``."""
    return int(now - days * SECONDS_PER_DAY)
