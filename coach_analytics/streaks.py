"""Current and longest activity streaks."""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Iterable, Set

from .dates import DateLike, to_calendar_key, to_date
from .schemas import ActivityLog, StreakResult

logger = logging.getLogger(__name__)


def completed_activity_dates(logs: Iterable[ActivityLog]) -> Set[str]:
    return {log.activity_date.isoformat() for log in logs if log.is_completed}


def _current_streak(keys: Set[str], now: DateLike) -> int:
    today = to_date(now)
    yesterday = today - timedelta(days=1)
    if today.isoformat() in keys:
        cursor = today
    elif yesterday.isoformat() in keys:
        cursor = yesterday
    else:
        return 0

    streak = 0
    while cursor.isoformat() in keys:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def _longest_streak(keys: Set[str]) -> int:
    days = sorted(to_date(k) for k in keys)
    if not days:
        return 0
    longest = running = 1
    for prev, nxt in zip(days, days[1:]):
        if (nxt - prev).days == 1:
            running += 1
        else:
            running = 1
        longest = max(longest, running)
    return longest


def calculate_streaks(activity_dates: Iterable[DateLike], now: DateLike) -> StreakResult:
    """Streaks over the distinct calendar days in ``activity_dates``.

    The current streak counts back from today, or from yesterday when today
    has no activity yet; two missed days in a row reset it to zero.
    """
    keys = {to_calendar_key(d) for d in activity_dates}
    result = StreakResult(
        current_streak=_current_streak(keys, now),
        longest_streak=_longest_streak(keys),
    )
    logger.debug("Streaks over %d active days: %s", len(keys), result)
    return result
