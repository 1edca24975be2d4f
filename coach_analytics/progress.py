"""Workout progress metrics and the combined workout analytics read-model."""
from __future__ import annotations

import logging
from collections import Counter
from statistics import mean
from typing import Iterable, Optional, Sequence

from .config import DEFAULT_LOOKBACK_DAYS, MUSCLE_TOP_N
from .dates import DateLike, WEEKDAY_NAMES
from .muscles import muscle_distribution
from .rounding import round_half_up, round_int
from .schemas import ActivityLog, ExerciseSetRecord, ProgressMetrics, WorkoutAnalytics
from .streaks import calculate_streaks, completed_activity_dates
from .volume import aggregate_weekly, completed_sessions, records_by_session

logger = logging.getLogger(__name__)


def _most_active_day(sessions: Sequence[ActivityLog]) -> Optional[str]:
    if not sessions:
        return None
    counts = Counter(s.activity_date.weekday() for s in sessions)
    # ties go to the earlier weekday
    weekday = min(counts, key=lambda d: (-counts[d], d))
    return WEEKDAY_NAMES[weekday]


def progress_metrics(
    logs: Sequence[ActivityLog],
    records: Iterable[ExerciseSetRecord],
    now: DateLike,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> ProgressMetrics:
    """Headline numbers for the workouts page.

    Totals and averages cover the lookback window; streaks use the full
    history so they match the dashboard.
    """
    sessions = completed_sessions(logs, now, lookback_days)
    grouped = records_by_session(records)
    total = len(sessions)

    if total:
        avg_duration = round_int(mean(s.duration_minutes for s in sessions))
        exercise_count = sum(len(grouped.get(s.id, ())) for s in sessions)
        avg_exercises = round_half_up(exercise_count / total, 1)
    else:
        avg_duration, avg_exercises = 0, 0.0

    streaks = calculate_streaks(completed_activity_dates(logs), now)
    return ProgressMetrics(
        total_workouts=total,
        avg_workout_duration=avg_duration,
        avg_exercises_per_workout=avg_exercises,
        current_streak=streaks.current_streak,
        longest_streak=streaks.longest_streak,
        most_active_day=_most_active_day(sessions),
    )


def workout_analytics(
    logs: Sequence[ActivityLog],
    records: Sequence[ExerciseSetRecord],
    now: DateLike,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    week_start: int = 0,
    muscle_limit: int = MUSCLE_TOP_N,
) -> WorkoutAnalytics:
    sessions = completed_sessions(logs, now, lookback_days)
    session_ids = {s.id for s in sessions}
    in_window = [r for r in records if r.session_id in session_ids]

    weekly = aggregate_weekly(logs, in_window, now, lookback_days, week_start)
    analytics = WorkoutAnalytics(
        weekly_volume=weekly.weekly_volume,
        weekly_frequency=weekly.weekly_frequency,
        muscle_distribution=tuple(muscle_distribution(in_window, muscle_limit)),
        progress_metrics=progress_metrics(logs, in_window, now, lookback_days),
    )
    logger.debug(
        "Workout analytics: %d sessions, %d exercise records in %d-day window",
        len(sessions),
        len(in_window),
        lookback_days,
    )
    return analytics
