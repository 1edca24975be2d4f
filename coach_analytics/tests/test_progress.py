from datetime import date

from coach_analytics.progress import progress_metrics, workout_analytics
from coach_analytics.schemas import ActivityLog, ExerciseSet, ExerciseSetRecord

NOW = date(2024, 3, 6)


def _log(log_id, day, minutes, status="completed"):
    return ActivityLog(id=log_id, subject_id="s1", activity_date=day, duration_minutes=minutes, status=status)


def _record(session_id, muscle, reps=5, weight=100):
    return ExerciseSetRecord(
        session_id=session_id,
        primary_muscle=muscle,
        sets=[ExerciseSet(completed=True, reps=reps, weight=weight)],
    )


LOGS = [
    _log("a", "2024-02-26", 50),  # Monday
    _log("b", "2024-02-28", 40),  # Wednesday
    _log("c", "2024-03-04", 65),  # Monday
    _log("d", "2024-03-05", 45),  # Tuesday
    _log("e", "2024-03-06", 30, status="in_progress"),
    _log("old", "2023-10-01", 90),
]
RECORDS = [
    _record("a", "legs"),
    _record("a", "glutes"),
    _record("b", "chest"),
    _record("c", "legs"),
    _record("c", "back"),
    _record("c", "legs"),
    _record("d", "chest"),
    _record("e", "arms"),
    _record("old", "shoulders"),
]


def test_progress_metrics():
    metrics = progress_metrics(LOGS, RECORDS, NOW, lookback_days=90)

    assert metrics.total_workouts == 4
    assert metrics.avg_workout_duration == 50
    assert metrics.avg_exercises_per_workout == 1.8
    assert metrics.current_streak == 2
    assert metrics.longest_streak == 2
    assert metrics.most_active_day == "Monday"


def test_progress_metrics_empty():
    metrics = progress_metrics([], [], NOW)
    assert metrics.total_workouts == 0
    assert metrics.avg_workout_duration == 0
    assert metrics.avg_exercises_per_workout == 0
    assert metrics.most_active_day is None


def test_most_active_day_tie_goes_to_earlier_weekday():
    logs = [_log("x", "2024-03-05", 30), _log("y", "2024-03-04", 30)]
    assert progress_metrics(logs, [], NOW).most_active_day == "Monday"


def test_workout_analytics_read_model():
    analytics = workout_analytics(LOGS, RECORDS, NOW, lookback_days=90)

    assert [w.week for w in analytics.weekly_volume] == ["2024-02-26", "2024-03-04"]
    assert [w.session_count for w in analytics.weekly_frequency] == [2, 2]
    assert analytics.weekly_volume[1].total_sets == 4
    assert analytics.weekly_volume[1].total_tonnage == 2000

    muscles = [(m.muscle, m.count) for m in analytics.muscle_distribution]
    # arms (in-progress session) and shoulders (outside window) are excluded
    assert muscles == [("legs", 3), ("chest", 2), ("glutes", 1), ("back", 1)]
    assert analytics.progress_metrics.total_workouts == 4


def test_workout_analytics_serializes_camel_case():
    payload = workout_analytics(LOGS, RECORDS, NOW).model_dump(by_alias=True)
    assert set(payload) == {"weeklyVolume", "weeklyFrequency", "muscleDistribution", "progressMetrics"}
    assert "totalTonnage" in payload["weeklyVolume"][0]
    assert "currentStreak" in payload["progressMetrics"]
