"""Calendar bucketing helpers.

Everything here works on ``YYYY-MM-DD`` calendar keys rather than instants so
that a session logged late in the evening never drifts into the next day
because of a timezone conversion. The reference "now" is always passed in.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union

from .errors import InvalidInputError

DateLike = Union[date, datetime, str]

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def to_date(value: DateLike) -> date:
    """Normalize a date, datetime or ISO string to a calendar date.

    Datetimes keep their own wall-clock date; no timezone conversion happens.
    Strings may carry a time part (``2024-03-05T22:10:00Z``), which is ignored.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidInputError(f"Malformed calendar date: {value!r}") from None
    raise InvalidInputError(f"Expected a date, datetime or ISO string, got {type(value).__name__}")


def to_calendar_key(value: DateLike) -> str:
    return to_date(value).isoformat()


def week_start_date(value: DateLike, week_start: int = 0) -> date:
    """Return the first day of the week containing ``value``.

    ``week_start`` follows ``date.weekday()`` numbering (0 = Monday).
    """
    if not 0 <= week_start <= 6:
        raise InvalidInputError(f"week_start must be between 0 and 6, got {week_start}")
    d = to_date(value)
    return d - timedelta(days=(d.weekday() - week_start) % 7)


def week_key(value: DateLike, week_start: int = 0) -> str:
    return week_start_date(value, week_start).isoformat()


def days_ago(n: int, now: DateLike) -> str:
    return (to_date(now) - timedelta(days=n)).isoformat()


def days_between(start: DateLike, end: DateLike) -> int:
    return (to_date(end) - to_date(start)).days


def within_window(value: DateLike, now: DateLike, days: int) -> bool:
    """True when ``value`` falls in the trailing ``days`` window ending at ``now``."""
    key = to_calendar_key(value)
    return days_ago(days, now) <= key <= to_calendar_key(now)


def day_of_program(start: DateLike, now: DateLike, cycle_days: int = 7) -> int:
    # a plan starting in the future reads as day 1
    elapsed = max(0, days_between(start, now))
    return (elapsed % cycle_days) + 1


def weekday_name(value: DateLike) -> str:
    return WEEKDAY_NAMES[to_date(value).weekday()]
