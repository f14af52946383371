"""
Week arithmetic for the calendar view.

Weeks start on Monday. Every helper accepts a ``date`` or a ``datetime``
(the time part is dropped) and returns plain ``date`` objects.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Union

DayLike = Union[date, datetime]

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _as_date(day: DayLike) -> date:
    if isinstance(day, datetime):
        return day.date()
    return day


def get_week_start(day: DayLike) -> date:
    """Monday of the week containing ``day``."""
    d = _as_date(day)
    return d - timedelta(days=d.weekday())


def get_week_end(day: DayLike) -> date:
    """Sunday of the week containing ``day``."""
    return get_week_start(day) + timedelta(days=6)


def format_date(day: DayLike) -> str:
    return _as_date(day).isoformat()


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


def get_week_dates(week_start: DayLike) -> List[date]:
    start = _as_date(week_start)
    return [start + timedelta(days=i) for i in range(7)]


def get_day_name(day: DayLike) -> str:
    return DAY_NAMES[_as_date(day).weekday()]


def get_previous_week_start(week_start: DayLike) -> date:
    return _as_date(week_start) - timedelta(days=7)


def get_next_week_start(week_start: DayLike) -> date:
    return _as_date(week_start) + timedelta(days=7)


def is_today(day: DayLike, today: Optional[date] = None) -> bool:
    return _as_date(day) == (today or date.today())


def format_date_short(day: DayLike) -> str:
    """``M/D`` without zero padding, e.g. ``1/5``."""
    d = _as_date(day)
    return f"{d.month}/{d.day}"


def format_week_range(week_start: DayLike) -> str:
    """``Jan 1 - 7`` within one month, ``Jan 29 - Feb 4`` across months."""
    start = get_week_start(week_start)
    end = start + timedelta(days=6)
    start_label = f"{MONTH_NAMES[start.month - 1]} {start.day}"
    if start.month == end.month:
        return f"{start_label} - {end.day}"
    return f"{start_label} - {MONTH_NAMES[end.month - 1]} {end.day}"
