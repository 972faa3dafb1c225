"""Datetime helpers"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive datetimes are interpreted as UTC, aware ones are converted.

    Args:
        dt: datetime with or without tzinfo

    Returns:
        UTC datetime (timezone.utc)
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime to the store's ISO format (None passes through)"""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()
