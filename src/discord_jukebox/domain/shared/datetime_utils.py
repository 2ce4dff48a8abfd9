"""Date/time helpers.

Always operate on timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return a timezone-aware datetime in UTC."""
    return datetime.now(UTC)


def seconds_since(moment: datetime | None, *, now: datetime | None = None) -> int:
    """Whole seconds elapsed since *moment*, or 0 when it is unset or in the future."""
    if moment is None:
        return 0
    reference = now or utcnow()
    return max(0, int((reference - moment).total_seconds()))
