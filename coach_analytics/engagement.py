"""Composite engagement score and client leaderboard.

score = adherence * 0.4 + consistency * 0.4 + goal credit

adherence    mean check-in adherence over the window, scaled to 0-100
consistency  check-ins in the window against the expected weekly cadence
goal credit  10 points per completed goal, capped at 20
"""
from __future__ import annotations

import logging
from datetime import date
from statistics import mean
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .config import (
    ADHERENCE_WEIGHT,
    CONSISTENCY_WEIGHT,
    ENGAGEMENT_WINDOW_DAYS,
    EXPECTED_CHECKINS_PER_WINDOW,
    GOAL_CREDIT_CAP,
    GOAL_CREDIT_PER_GOAL,
    LEADERBOARD_SIZE,
)
from .dates import DateLike, days_ago, to_calendar_key, to_date
from .errors import InvalidInputError
from .rounding import round_int
from .schemas import CheckIn, EngagementScore, GoalTally

logger = logging.getLogger(__name__)


def checkin_adherence(checkin: CheckIn) -> Optional[float]:
    """Mean of the ratings present on a check-in, or None when it has none."""
    ratings = [r for r in (checkin.diet_adherence, checkin.workout_adherence) if r is not None]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def adherence_score(checkins: Iterable[CheckIn]) -> int:
    means = [m for m in (checkin_adherence(c) for c in checkins) if m is not None]
    if not means:
        return 0
    # ratings are 0-10
    return round_int(mean(means) * 10)


def consistency_score(checkin_count: int, expected_checkins: int = EXPECTED_CHECKINS_PER_WINDOW) -> int:
    if expected_checkins <= 0:
        raise InvalidInputError(f"expected_checkins must be positive, got {expected_checkins}")
    return min(100, round_int(checkin_count / expected_checkins * 100))


def goal_credit(goals_completed: int) -> int:
    return min(goals_completed * GOAL_CREDIT_PER_GOAL, GOAL_CREDIT_CAP)


def last_checkin_date(checkins: Iterable[CheckIn]) -> Optional[date]:
    submitted = [to_date(c.submitted_at) for c in checkins if c.submitted_at is not None]
    return max(submitted) if submitted else None


def score_subject(
    subject_id: str,
    checkins: Iterable[CheckIn],
    goals: Optional[GoalTally],
    now: DateLike,
    window_days: int = ENGAGEMENT_WINDOW_DAYS,
    expected_checkins: int = EXPECTED_CHECKINS_PER_WINDOW,
) -> EngagementScore:
    """Score one subject from their check-in history and goal tally.

    Check-ins belonging to other subjects are ignored. A subject with no
    activity gets a zeroed record rather than being dropped.
    """
    history = [c for c in checkins if c.subject_id == subject_id]
    cutoff = days_ago(window_days, now)
    recent = [
        c for c in history
        if c.submitted_at is not None and to_calendar_key(c.submitted_at) >= cutoff
    ]

    adherence = adherence_score(recent)
    consistency = consistency_score(len(recent), expected_checkins)
    completed = goals.completed_count if goals is not None else 0

    score = round_int(
        adherence * ADHERENCE_WEIGHT
        + consistency * CONSISTENCY_WEIGHT
        + goal_credit(completed)
    )
    return EngagementScore(
        subject_id=subject_id,
        score=score,
        adherence_score=adherence,
        consistency_score=consistency,
        goals_completed=completed,
        last_checkin_date=last_checkin_date(history),
    )


def build_leaderboard(
    subject_ids: Sequence[str],
    checkins: Iterable[CheckIn],
    goal_tallies: Mapping[str, GoalTally],
    now: DateLike,
    limit: Optional[int] = LEADERBOARD_SIZE,
    window_days: int = ENGAGEMENT_WINDOW_DAYS,
    expected_checkins: int = EXPECTED_CHECKINS_PER_WINDOW,
) -> List[EngagementScore]:
    """Rank subjects by composite score, highest first.

    Ties keep the first-seen order of ``subject_ids``; repeated ids are scored
    once. ``limit=None`` returns everyone, which is what exports use.
    """
    unique_ids = list(dict.fromkeys(subject_ids))
    by_subject: Dict[str, List[CheckIn]] = {sid: [] for sid in unique_ids}
    for checkin in checkins:
        if checkin.subject_id in by_subject:
            by_subject[checkin.subject_id].append(checkin)

    scores = [
        score_subject(
            sid,
            by_subject[sid],
            goal_tallies.get(sid),
            now,
            window_days=window_days,
            expected_checkins=expected_checkins,
        )
        for sid in unique_ids
    ]
    ranked = sorted(scores, key=lambda s: -s.score)
    logger.debug("Ranked %d subjects", len(ranked))
    return ranked if limit is None else ranked[:limit]
