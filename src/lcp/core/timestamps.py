"""
UTC timestamp utilities.

Entities store timezone-aware UTC datetimes and persist them as ISO-8601
strings. ``advance()`` gives the monotonically non-decreasing "touch" used
when an entity refreshes its ``updated_at``: a wall clock that stepped
backwards never produces an earlier timestamp than the one already stored.

Tags:
    timestamps, utc, datetime, iso8601, lcp-core
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through unchanged."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def advance(previous: datetime | None) -> datetime:
    """Current UTC time, but never earlier than ``previous``."""
    now = utc_now()
    if previous is not None and previous > now:
        return previous
    return now


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


def from_iso8601(s: str | None) -> datetime | None:
    """Parse ISO 8601 string to a timezone-aware datetime.

    Naive values are assumed to be UTC; a trailing ``Z`` is accepted.
    """
    if s is None:
        return None
    return ensure_utc(datetime.fromisoformat(s.replace("Z", "+00:00") if s.endswith("Z") else s))


__all__ = ["utc_now", "ensure_utc", "advance", "to_iso8601", "from_iso8601"]
