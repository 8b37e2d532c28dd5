"""Shared date and time helpers used across the scheduling core."""

from datetime import date, datetime, time, timedelta
from typing import Union

DateLike = Union[date, str]


def parse_date(value: DateLike) -> date:
    """Coerce a ``YYYY-MM-DD`` string (or a date) into a date.

    Examples:
        >>> parse_date("2024-03-02")
        datetime.date(2024, 3, 2)
        >>> parse_date(" 2024-12-25 ")
        datetime.date(2024, 12, 25)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_time(value: Union[time, str]) -> time:
    """Coerce an ``HH:MM`` string (or a time) into a time."""
    if isinstance(value, time):
        return value
    return datetime.strptime(value.strip(), "%H:%M").time()


def daterange(start: date, end: date):
    """Yield each date in ``[start, end)``."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def start_of_week(anchor: date, week_start_day: int) -> date:
    """Return the first day of the week containing ``anchor``."""
    return anchor - timedelta(days=(anchor.weekday() - week_start_day) % 7)


def start_of_next_month(anchor: date) -> date:
    if anchor.month == 12:
        return date(anchor.year + 1, 1, 1)
    return date(anchor.year, anchor.month + 1, 1)
