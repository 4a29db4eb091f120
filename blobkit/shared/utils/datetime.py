"""
UTC datetime helpers.

SAS timestamps are always timezone-aware UTC with whole-second precision.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """
    Return dt as a UTC-aware datetime.

    Naive values are assumed to already be UTC; aware values are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def truncate_to_seconds(dt: datetime) -> datetime:
    """Drop sub-second precision (SAS start/expiry are serialized to the second)."""
    return dt.replace(microsecond=0)
