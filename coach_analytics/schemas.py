"""Shared Pydantic models for the coach analytics engine.

Inputs are read-only snapshots handed over by the persistence layer; results
are freshly built on every call. Both are frozen. Results serialize with
camelCase aliases (``currentStreak``, ``weeklyVolume``) that report
generators rely on.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .dates import to_date


class FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class ActivityLog(FrozenModel):
    id: str
    subject_id: str
    activity_date: date
    duration_minutes: float = Field(default=0, ge=0)
    status: Literal["completed", "in_progress", "planned"] = "completed"

    @field_validator("activity_date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return to_date(value)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


class ExerciseSet(FrozenModel):
    completed: bool = False
    reps: Optional[int] = Field(default=None, ge=0)
    weight: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _completed_sets_need_reps(self) -> "ExerciseSet":
        if self.completed and self.reps is None:
            raise ValueError("completed set is missing reps")
        return self


class ExerciseSetRecord(FrozenModel):
    session_id: str
    primary_muscle: Optional[str] = None
    sets: Tuple[ExerciseSet, ...] = ()


class CheckIn(FrozenModel):
    subject_id: str
    submitted_at: Optional[datetime] = None
    diet_adherence: Optional[int] = Field(default=None, ge=0, le=10)
    workout_adherence: Optional[int] = Field(default=None, ge=0, le=10)


class GoalTally(FrozenModel):
    subject_id: str
    completed_count: int = Field(default=0, ge=0)
    active_count: int = Field(default=0, ge=0)


class Food(FrozenModel):
    """Per-100g nutrient profile. Calories are always derived, never stored."""

    name: Optional[str] = None
    protein_per_100g: float = Field(default=0, ge=0)
    carbs_per_100g: float = Field(default=0, ge=0)
    fat_per_100g: float = Field(default=0, ge=0)
    fiber_per_100g: float = Field(default=0, ge=0)
    default_serving_size: float = Field(default=0, ge=0)
    default_serving_unit: str = "g"

    @field_validator(
        "protein_per_100g",
        "carbs_per_100g",
        "fat_per_100g",
        "fiber_per_100g",
        "default_serving_size",
        mode="before",
    )
    @classmethod
    def _missing_is_zero(cls, value):
        return 0 if value is None else value

    @property
    def calories_per_100g(self) -> int:
        from .nutrition import calories_from_macros

        return calories_from_macros(self.protein_per_100g, self.carbs_per_100g, self.fat_per_100g)


class RecipeIngredient(FrozenModel):
    quantity: float = Field(..., ge=0)
    unit: str = "g"
    food: Food


class MealEntry(FrozenModel):
    logged_on: date
    quantity: float = Field(..., ge=0)
    unit: str = "g"
    food: Food

    @field_validator("logged_on", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return to_date(value)


class PlanAssignment(FrozenModel):
    id: str
    subject_id: str
    plan_type: Literal["workout", "diet"]
    name: str = "Untitled Plan"
    start_date: date
    end_date: Optional[date] = None
    duration_weeks: Optional[int] = Field(default=None, gt=0)
    is_active: bool = True

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return None if value is None else to_date(value)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class NutritionFacts(FrozenModel):
    calories: int
    protein: float
    carbs: float
    fat: float
    fiber: float


class MacroTotals(FrozenModel):
    calories: int
    protein: float
    carbs: float
    fat: float


class MacroSplit(FrozenModel):
    protein_pct: int
    carbs_pct: int
    fat_pct: int


class StreakResult(FrozenModel):
    current_streak: int
    longest_streak: int


class SessionVolume(FrozenModel):
    sets: int
    reps: int
    tonnage: float


class WeeklyVolume(FrozenModel):
    week: str
    total_sets: int
    total_reps: int
    total_tonnage: int


class WeeklyFrequency(FrozenModel):
    week: str
    session_count: int


class WeeklyTrainingSummary(FrozenModel):
    weekly_volume: Tuple[WeeklyVolume, ...] = ()
    weekly_frequency: Tuple[WeeklyFrequency, ...] = ()


class MuscleCount(FrozenModel):
    muscle: str
    count: int


class EngagementScore(FrozenModel):
    subject_id: str
    score: int
    adherence_score: int
    consistency_score: int
    goals_completed: int
    last_checkin_date: Optional[date] = None


class ProgressMetrics(FrozenModel):
    total_workouts: int
    avg_workout_duration: int
    avg_exercises_per_workout: float
    current_streak: int
    longest_streak: int
    most_active_day: Optional[str] = None


class WorkoutAnalytics(FrozenModel):
    weekly_volume: Tuple[WeeklyVolume, ...]
    weekly_frequency: Tuple[WeeklyFrequency, ...]
    muscle_distribution: Tuple[MuscleCount, ...]
    progress_metrics: ProgressMetrics


class ActivePlan(FrozenModel):
    plan_id: str
    name: str
    start_date: date
    day_of_program: int
    days_active: int
    weeks_active: int
    progress_percent: Optional[int] = None


class DashboardSummary(FrozenModel):
    current_streak: int
    workouts_this_week: int
    total_minutes_this_week: int
    calories_logged_today: int
    next_checkin_date: date
    next_checkin_label: str
    checkin_overdue: bool
    active_workout_plan: Optional[ActivePlan] = None
    active_diet_plan: Optional[ActivePlan] = None


# ---------------------------------------------------------------------------
# HTTP payloads
# ---------------------------------------------------------------------------


class WorkoutHistory(FrozenModel):
    logs: Tuple[ActivityLog, ...] = ()
    records: Tuple[ExerciseSetRecord, ...] = ()


class ScaleRequest(FrozenModel):
    food: Food
    quantity: float = Field(..., ge=0)
    unit: str = "g"


class RecipeRequest(FrozenModel):
    ingredients: Tuple[RecipeIngredient, ...] = ()
    servings: Optional[int] = Field(default=None, ge=1)


class LeaderboardRequest(FrozenModel):
    subject_ids: Tuple[str, ...]
    now: Optional[datetime] = None
    limit: Optional[int] = Field(default=None, ge=1)
    export: bool = False


class RecipeSummary(FrozenModel):
    total: MacroTotals
    per_serving: Optional[MacroTotals] = None
