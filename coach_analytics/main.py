"""FastAPI service exposing the coach analytics engine."""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .dashboard import build_dashboard_summary
from .engagement import build_leaderboard
from .errors import InvalidInputError
from .nutrition import per_serving, rollup_recipe, scale_nutrition
from .progress import workout_analytics
from .schemas import (
    ActivityLog,
    CheckIn,
    DashboardSummary,
    EngagementScore,
    ExerciseSetRecord,
    GoalTally,
    LeaderboardRequest,
    MealEntry,
    NutritionFacts,
    PlanAssignment,
    RecipeRequest,
    RecipeSummary,
    ScaleRequest,
    WorkoutAnalytics,
    WorkoutHistory,
)

settings = get_settings()
logging.getLogger("coach_analytics").setLevel(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Coach Analytics", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory placeholder storage so the endpoints can be exercised locally.
ACTIVITY_LOGS: Dict[str, List[ActivityLog]] = {}
EXERCISE_RECORDS: Dict[str, List[ExerciseSetRecord]] = {}
CHECKINS: Dict[str, List[CheckIn]] = {}
GOALS: Dict[str, GoalTally] = {}
ASSIGNMENTS: Dict[str, List[PlanAssignment]] = {}
MEALS: Dict[str, List[MealEntry]] = {}


def _today(now: Optional[date]) -> date:
    # the request boundary is the only place wall-clock time is read
    return now or date.today()


def _check_subject(subject_id: str, items: list) -> None:
    for item in items:
        if item.subject_id != subject_id:
            raise HTTPException(
                status_code=422,
                detail=f"Record belongs to {item.subject_id}, not {subject_id}",
            )


@app.post("/workouts/{subject_id}")
def post_workouts(subject_id: str, history: WorkoutHistory) -> Dict[str, int]:
    _check_subject(subject_id, list(history.logs))
    logs = ACTIVITY_LOGS.setdefault(subject_id, [])
    records = EXERCISE_RECORDS.setdefault(subject_id, [])
    logs.extend(history.logs)
    records.extend(history.records)
    logger.info("Stored %d logs and %d exercise records for %s", len(history.logs), len(history.records), subject_id)
    return {"logs": len(logs), "records": len(records)}


@app.post("/checkins/{subject_id}")
def post_checkins(subject_id: str, checkins: List[CheckIn]) -> Dict[str, int]:
    _check_subject(subject_id, checkins)
    stored = CHECKINS.setdefault(subject_id, [])
    stored.extend(checkins)
    return {"checkins": len(stored)}


@app.post("/goals/{subject_id}", response_model=GoalTally)
def post_goals(subject_id: str, tally: GoalTally) -> GoalTally:
    _check_subject(subject_id, [tally])
    GOALS[subject_id] = tally
    return tally


@app.post("/assignments/{subject_id}")
def post_assignments(subject_id: str, assignments: List[PlanAssignment]) -> Dict[str, int]:
    _check_subject(subject_id, assignments)
    ASSIGNMENTS[subject_id] = list(assignments)
    return {"assignments": len(assignments)}


@app.post("/meals/{subject_id}")
def post_meals(subject_id: str, meals: List[MealEntry]) -> Dict[str, int]:
    stored = MEALS.setdefault(subject_id, [])
    stored.extend(meals)
    return {"meals": len(stored)}


@app.get("/analytics/workouts/{subject_id}", response_model=WorkoutAnalytics)
def get_workout_analytics(
    subject_id: str,
    days: Optional[int] = Query(default=None, gt=0),
    now: Optional[date] = None,
) -> WorkoutAnalytics:
    logs = ACTIVITY_LOGS.get(subject_id)
    if not logs:
        raise HTTPException(status_code=404, detail="No workout data for subject")
    return workout_analytics(
        logs,
        EXERCISE_RECORDS.get(subject_id, []),
        _today(now),
        lookback_days=days or settings.lookback_days,
        week_start=settings.week_start,
        muscle_limit=settings.muscle_top_n,
    )


@app.get("/analytics/dashboard/{subject_id}", response_model=DashboardSummary)
def get_dashboard(
    subject_id: str,
    now: Optional[date] = None,
    frequency_days: Optional[int] = Query(default=None, gt=0),
) -> DashboardSummary:
    known = (ACTIVITY_LOGS, CHECKINS, ASSIGNMENTS, MEALS)
    if not any(subject_id in store for store in known):
        raise HTTPException(status_code=404, detail="Subject not found")
    return build_dashboard_summary(
        ACTIVITY_LOGS.get(subject_id, []),
        CHECKINS.get(subject_id, []),
        ASSIGNMENTS.get(subject_id, []),
        _today(now),
        frequency_days=frequency_days or settings.checkin_frequency_days,
        meals=MEALS.get(subject_id, []),
        week_start=settings.week_start,
    )


@app.post("/analytics/leaderboard", response_model=List[EngagementScore])
def post_leaderboard(payload: LeaderboardRequest) -> List[EngagementScore]:
    subject_ids = list(dict.fromkeys(payload.subject_ids))
    checkins = [c for sid in subject_ids for c in CHECKINS.get(sid, [])]
    if payload.export:
        limit = None
    else:
        limit = payload.limit or settings.leaderboard_size
    return build_leaderboard(
        subject_ids,
        checkins,
        GOALS,
        payload.now or date.today(),
        limit=limit,
        window_days=settings.engagement_window_days,
        expected_checkins=settings.expected_checkins,
    )


@app.post("/nutrition/scale", response_model=NutritionFacts)
def post_scale_nutrition(payload: ScaleRequest) -> NutritionFacts:
    try:
        return scale_nutrition(payload.food, payload.quantity, payload.unit)
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/nutrition/recipe", response_model=RecipeSummary)
def post_recipe_rollup(payload: RecipeRequest) -> RecipeSummary:
    try:
        total = rollup_recipe(payload.ingredients)
        serving = per_serving(total, payload.servings) if payload.servings else None
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RecipeSummary(total=total, per_serving=serving)
