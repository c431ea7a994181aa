"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the engine should be timezone-aware UTC.
"""

import time
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries (SQLite returns naive values).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def elapsed_ms(started: float) -> int:
    """Milliseconds since started (a time.perf_counter() reading)."""
    return int((time.perf_counter() - started) * 1000)
