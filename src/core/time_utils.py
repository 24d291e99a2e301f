from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Return current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure the given datetime is timezone-aware in UTC.

    - If dt is None, returns None.
    - If dt is naive, interpret it as UTC.
    - If dt has a timezone, convert to UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_utc(dt: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as ISO8601 with millisecond precision and 'Z' suffix.

    Example: 2024-01-01T00:00:00.000Z. Returns None if dt is None.
    """
    if dt is None:
        return None
    s = ensure_aware_utc(dt).isoformat(timespec="milliseconds")
    if s.endswith("+00:00"):
        s = s[:-6] + "Z"
    return s


def parse_utc(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """Parse an ISO8601 string (supporting trailing 'Z') or pass-through datetime into aware UTC.

    Returns None if value is None, empty or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware_utc(value)
    s = str(value).strip()
    if not s:
        return None
    if s.endswith('Z'):
        s = s[:-1] + '+00:00'
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    return ensure_aware_utc(dt)


__all__ = [
    "utc_now",
    "ensure_aware_utc",
    "isoformat_utc",
    "parse_utc",
]
