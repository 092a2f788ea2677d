from .date_utils import (
    SECONDS_PER_DAY,
    SECONDS_PER_MINUTE,
    days_ago,
    from_unix_seconds,
    to_iso_z,
    unix_now,
    utc_now,
)

__all__ = [
    "SECONDS_PER_DAY",
    "SECONDS_PER_MINUTE",
    "days_ago",
    "from_unix_seconds",
    "to_iso_z",
    "unix_now",
    "utc_now",
]
