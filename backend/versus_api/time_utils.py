"""UTC timestamps for Versus rows.

SQLite drops timezone information on ``DateTime(timezone=True)`` columns, so
values read back from it are naive. Everything the API returns goes through
:func:`coerce_utc` first.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` in UTC, treating naive datetimes as UTC already."""

    if value is None:
        return None
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
