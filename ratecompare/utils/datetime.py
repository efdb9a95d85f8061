"""Shared date helpers; every calendar day is taken in UTC."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta


def ensure_utc(value: datetime) -> datetime:
    """Return a timezone-aware datetime in UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_now() -> datetime:
    """Return the current UTC datetime."""

    return datetime.now(UTC)


def today_utc() -> date:
    """Return the current calendar day in UTC."""

    return utc_now().date()


def to_calendar_day(value: date | datetime) -> date:
    """Truncate ``value`` to its calendar day, converting datetimes to UTC first."""

    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each calendar day from ``start`` to ``end`` inclusive, ascending."""

    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
