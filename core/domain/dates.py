"""
Calendar arithmetic on whole days.

Everything here works on ``datetime.date`` so sub-day components never enter
a difference; reminders convert to local-midnight timestamps at the edge.
"""

import re
from datetime import date, datetime, time, timedelta

from core.domain.models import InvalidDateFormat

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str | date) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Dates pass through unchanged so callers can accept either form.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateFormat(value)

    text = value.strip()
    if not _ISO_DAY.match(text):
        raise InvalidDateFormat(value)
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateFormat(value) from e


def format_date(value: date) -> str:
    return value.isoformat()


def days_between(start: date, end: date) -> int:
    """Signed whole days from ``start`` to ``end``."""
    return (end - start).days


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def days_from_today(value: date, today: date | None = None) -> int:
    """Signed days from today to ``value``; negative means it is in the past."""
    if today is None:
        today = date.today()
    return days_between(today, value)


def to_timestamp(value: date) -> datetime:
    """Local midnight of ``value``."""
    return datetime.combine(value, time.min)
