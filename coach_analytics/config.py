"""Constants and runtime settings for the coach analytics engine."""
from __future__ import annotations

import os
from typing import Dict, Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Nutrition
# ---------------------------------------------------------------------------

KCAL_PER_GRAM: Dict[str, int] = {
    "protein": 4,
    "carbs": 4,
    "fat": 9,
}

# Grams per unit; "serving" is resolved against the food itself.
GRAMS_PER_UNIT: Dict[str, float] = {
    "g": 1.0,
    "oz": 28.35,
    "lb": 453.6,
}

# ---------------------------------------------------------------------------
# Training / engagement defaults
# ---------------------------------------------------------------------------

DEFAULT_LOOKBACK_DAYS = 90
ENGAGEMENT_WINDOW_DAYS = 30
EXPECTED_CHECKINS_PER_WINDOW = 4  # weekly cadence over 30 days
GOAL_CREDIT_PER_GOAL = 10
GOAL_CREDIT_CAP = 20
ADHERENCE_WEIGHT = 0.4
CONSISTENCY_WEIGHT = 0.4
LEADERBOARD_SIZE = 10
MUSCLE_TOP_N = 8
DEFAULT_CHECKIN_FREQUENCY_DAYS = 7
PROGRAM_CYCLE_DAYS = 7

ENV_PREFIX = "COACH_ANALYTICS_"


class AnalyticsSettings(BaseModel):
    lookback_days: int = Field(default=DEFAULT_LOOKBACK_DAYS, gt=0)
    engagement_window_days: int = Field(default=ENGAGEMENT_WINDOW_DAYS, gt=0)
    expected_checkins: int = Field(default=EXPECTED_CHECKINS_PER_WINDOW, gt=0)
    leaderboard_size: int = Field(default=LEADERBOARD_SIZE, gt=0)
    muscle_top_n: int = Field(default=MUSCLE_TOP_N, gt=0)
    checkin_frequency_days: int = Field(default=DEFAULT_CHECKIN_FREQUENCY_DAYS, gt=0)
    week_start: int = Field(default=0, ge=0, le=6)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyticsSettings":
        """Build settings from ``COACH_ANALYTICS_*`` variables.

        Unset variables keep their defaults, e.g. ``COACH_ANALYTICS_LOOKBACK_DAYS=60``.
        """
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        return cls(**values)


_settings: Optional[AnalyticsSettings] = None


def get_settings() -> AnalyticsSettings:
    global _settings
    if _settings is None:
        _settings = AnalyticsSettings.from_env()
    return _settings
