"""
Clock helpers.

Every time-relative rule (future start, cancellation notice) receives its
"now" from a ``Clock`` so tests can pin time. Timestamps are kept in UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    SQLite returns naive values for ``DateTime(timezone=True)`` columns; those
    were written as UTC, so naive inputs are treated as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
