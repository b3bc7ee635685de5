"""Timezone helpers. All stored timestamps are UTC-aware."""

from datetime import datetime, timezone
from typing import Optional

def now_utc() -> datetime:
    """Get the current time in UTC."""
    return datetime.now(timezone.utc)

def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is UTC-aware.

    Naive datetimes are assumed to already be in UTC (SQLite drops tzinfo on
    the way back out), aware datetimes are converted.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Render a datetime as ISO-8601 in UTC, or None."""
    dt = ensure_utc(dt)
    return dt.isoformat() if dt else None
