"""
UTC datetime utilities for consistent timezone handling.

All datetime values stored or returned by the service are timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string (the format the mobile client stores)."""
    return utc_now().isoformat()


def epoch_millis(dt: datetime | None = None) -> int:
    """Return milliseconds since the epoch for dt (default: now)."""
    return int((dt or utc_now()).timestamp() * 1000)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository boundaries to normalize datetimes.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)
