"""Datetime utilities: timezone-aware timestamps and calendar-month helpers.

Usage:
    from libs.common.datetime_utils import utc_now, same_month

    created_at: datetime = Field(default_factory=utc_now)
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    This replaces the deprecated datetime.utcnow() which returns naive datetimes.
    Always use this for persisted timestamps.
    """
    return datetime.now(timezone.utc)


def same_month(a: date, b: date) -> bool:
    """True when both dates fall in the same calendar month of the same year."""
    return a.year == b.year and a.month == b.month


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day`` (negative goes back)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def last_months(today: date, count: int) -> list[date]:
    """First days of the ``count`` months ending with the month of ``today``, oldest first."""
    return [shift_month(today, -offset) for offset in range(count - 1, -1, -1)]
