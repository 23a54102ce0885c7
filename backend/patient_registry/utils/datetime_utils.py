"""
Date/time helpers for consistent handling across the registry.

All instants are stored and returned in UTC. Naive values coming back from
drivers without timezone support (SQLite) are treated as UTC.
"""

from datetime import date, datetime, time, timezone


def as_utc(dt: datetime) -> datetime:
    """
    Convert dt to tz-aware UTC.
    If dt is naive, it is treated as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_string(iso_string: str) -> datetime:
    """
    Parse an ISO 8601 date or datetime string to a UTC datetime.

    Accepts "1990-01-01", "1990-01-01T00:00:00", "1990-01-01T00:00:00Z" and
    offset forms. Date-only strings resolve to midnight UTC.

    Raises:
        ValueError: if the string is not a valid ISO 8601 value
    """
    value = iso_string.strip()
    if not value:
        raise ValueError("empty date string")
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    return as_utc(datetime.fromisoformat(value))


def to_utc_instant(value: date | datetime | str) -> datetime:
    """Normalize a date, datetime or ISO string to a UTC datetime."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        return parse_iso_string(value)
    raise TypeError(f"Unsupported date value: {type(value).__name__}")
