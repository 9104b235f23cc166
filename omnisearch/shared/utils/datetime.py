"""
UTC datetime utilities for consistent timezone handling.

All datetime values leaving the search pipeline are timezone-aware UTC.
Naive datetimes are treated as UTC.
"""

from datetime import UTC, datetime


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume it's UTC and attach timezone
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """
    Parse a serialized timestamp into a UTC-aware datetime.

    Index payloads carry ISO-8601 strings (with offset or trailing 'Z');
    legacy rows may already hold datetimes. Missing values stay None.

    Args:
        value: ISO-8601 string, datetime, or None

    Returns:
        UTC-aware datetime or None

    Raises:
        ValueError: If value is a non-empty string that is not ISO-8601
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value))
