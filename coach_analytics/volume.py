"""Weekly training volume and frequency."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from .config import DEFAULT_LOOKBACK_DAYS
from .dates import DateLike, week_key, within_window
from .rounding import round_int
from .schemas import (
    ActivityLog,
    ExerciseSetRecord,
    SessionVolume,
    WeeklyFrequency,
    WeeklyTrainingSummary,
    WeeklyVolume,
)

logger = logging.getLogger(__name__)


def completed_sessions(
    logs: Iterable[ActivityLog],
    now: DateLike,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> List[ActivityLog]:
    """Completed logs dated inside the trailing lookback window, oldest first."""
    sessions = [
        log for log in logs
        if log.is_completed and within_window(log.activity_date, now, lookback_days)
    ]
    return sorted(sessions, key=lambda log: log.activity_date)


def records_by_session(records: Iterable[ExerciseSetRecord]) -> Dict[str, List[ExerciseSetRecord]]:
    grouped: Dict[str, List[ExerciseSetRecord]] = defaultdict(list)
    for record in records:
        grouped[record.session_id].append(record)
    return grouped


def session_volume(records: Iterable[ExerciseSetRecord]) -> SessionVolume:
    sets = reps = 0
    tonnage = 0.0
    for record in records:
        for s in record.sets:
            if not s.completed:
                continue
            sets += 1
            reps += s.reps
            tonnage += s.weight * s.reps
    return SessionVolume(sets=sets, reps=reps, tonnage=tonnage)


def aggregate_weekly(
    logs: Sequence[ActivityLog],
    records: Iterable[ExerciseSetRecord],
    now: DateLike,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    week_start: int = 0,
) -> WeeklyTrainingSummary:
    """Bucket completed sessions by week.

    Both sequences share the same week keys and are in chronological order.
    A session with no exercise records still counts toward frequency.
    """
    sessions = completed_sessions(logs, now, lookback_days)
    grouped = records_by_session(records)

    buckets: Dict[str, Dict[str, float]] = {}
    for session in sessions:
        week = week_key(session.activity_date, week_start)
        bucket = buckets.setdefault(week, {"sets": 0, "reps": 0, "tonnage": 0.0, "sessions": 0})
        volume = session_volume(grouped.get(session.id, ()))
        bucket["sets"] += volume.sets
        bucket["reps"] += volume.reps
        bucket["tonnage"] += volume.tonnage
        bucket["sessions"] += 1

    weeks = sorted(buckets)
    summary = WeeklyTrainingSummary(
        weekly_volume=tuple(
            WeeklyVolume(
                week=w,
                total_sets=int(buckets[w]["sets"]),
                total_reps=int(buckets[w]["reps"]),
                total_tonnage=round_int(buckets[w]["tonnage"]),
            )
            for w in weeks
        ),
        weekly_frequency=tuple(
            WeeklyFrequency(week=w, session_count=int(buckets[w]["sessions"])) for w in weeks
        ),
    )
    logger.debug("Aggregated %d sessions into %d weeks", len(sessions), len(weeks))
    return summary
