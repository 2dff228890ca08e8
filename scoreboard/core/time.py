"""Clock and lap-time formatting helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as ISO-8601, marking naive values (SQLite) as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.isoformat() + "Z"
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_time(milliseconds: int) -> str:
    """Format a lap time in milliseconds as ``MM:SS.mmm``."""

    total_seconds, ms = divmod(int(milliseconds), 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}.{ms:03d}"


def week_progress(now: Optional[datetime] = None) -> int:
    """Percentage of the current ISO week (Monday 00:00 UTC) already elapsed."""

    now = now or utcnow()
    elapsed = now.weekday() * 86400 + now.hour * 3600 + now.minute * 60 + now.second
    return int(elapsed * 100 // (7 * 86400))


__all__ = ["format_time", "isoformat", "utcnow", "week_progress"]
