"""Landing dashboard read-model for a single client."""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence, Tuple

from .config import DEFAULT_CHECKIN_FREQUENCY_DAYS, PROGRAM_CYCLE_DAYS
from .dates import DateLike, day_of_program, days_between, to_date, week_key
from .engagement import last_checkin_date
from .errors import InvalidInputError
from .nutrition import rollup_meals
from .rounding import round_int
from .schemas import ActivePlan, ActivityLog, CheckIn, DashboardSummary, MealEntry, PlanAssignment
from .streaks import calculate_streaks, completed_activity_dates

logger = logging.getLogger(__name__)

OVERDUE_SUFFIX = " (Overdue)"


def format_checkin_label(day: date, overdue: bool) -> str:
    label = f"{day:%a, %b} {day.day}"
    return label + OVERDUE_SUFFIX if overdue else label


def next_checkin(
    last_checkin: Optional[date],
    frequency_days: int,
    now: DateLike,
) -> Tuple[date, str, bool]:
    """Project the next check-in date, its display label and whether it is overdue.

    With no prior check-in the next one is due today.
    """
    if frequency_days <= 0:
        raise InvalidInputError(f"frequency_days must be positive, got {frequency_days}")
    today = to_date(now)
    due = last_checkin + timedelta(days=frequency_days) if last_checkin else today
    overdue = due < today
    return due, format_checkin_label(due, overdue), overdue


def _plan_progress(assignment: PlanAssignment, days_active: int) -> Optional[int]:
    if assignment.end_date is not None:
        total_days = days_between(assignment.start_date, assignment.end_date)
    elif assignment.duration_weeks:
        total_days = assignment.duration_weeks * 7
    else:
        return None
    if total_days <= 0:
        return 100
    return min(100, round_int(days_active / total_days * 100))


def active_plan(
    assignments: Iterable[PlanAssignment],
    plan_type: str,
    now: DateLike,
) -> Optional[ActivePlan]:
    """The most recently started active assignment of ``plan_type``, or None."""
    today = to_date(now)
    candidates = [
        a for a in assignments
        if a.plan_type == plan_type and a.is_active and a.start_date <= today
    ]
    if not candidates:
        return None
    current = max(candidates, key=lambda a: a.start_date)
    days_active = days_between(current.start_date, today)
    return ActivePlan(
        plan_id=current.id,
        name=current.name,
        start_date=current.start_date,
        day_of_program=day_of_program(current.start_date, today, PROGRAM_CYCLE_DAYS),
        days_active=days_active,
        weeks_active=days_active // 7,
        progress_percent=_plan_progress(current, days_active),
    )


def build_dashboard_summary(
    logs: Sequence[ActivityLog],
    checkins: Iterable[CheckIn],
    assignments: Sequence[PlanAssignment],
    now: DateLike,
    frequency_days: int = DEFAULT_CHECKIN_FREQUENCY_DAYS,
    meals: Iterable[MealEntry] = (),
    week_start: int = 0,
) -> DashboardSummary:
    today = to_date(now)
    this_week = week_key(today, week_start)
    week_logs = [
        log for log in logs
        if log.is_completed and week_key(log.activity_date, week_start) == this_week
    ]
    streaks = calculate_streaks(completed_activity_dates(logs), today)
    due, label, overdue = next_checkin(last_checkin_date(checkins), frequency_days, today)

    summary = DashboardSummary(
        current_streak=streaks.current_streak,
        workouts_this_week=len(week_logs),
        total_minutes_this_week=round_int(sum(log.duration_minutes for log in week_logs)),
        calories_logged_today=rollup_meals(meals, today).calories,
        next_checkin_date=due,
        next_checkin_label=label,
        checkin_overdue=overdue,
        active_workout_plan=active_plan(assignments, "workout", today),
        active_diet_plan=active_plan(assignments, "diet", today),
    )
    logger.debug("Dashboard for week %s: %s", this_week, summary)
    return summary
