import pytest
from fastapi.testclient import TestClient

from coach_analytics import main
from coach_analytics.main import app

client = TestClient(app)

CHICKEN = {"protein_per_100g": 31, "carbs_per_100g": 0, "fat_per_100g": 3.6, "default_serving_size": 120}


@pytest.fixture(autouse=True)
def clear_stores():
    for store in (main.ACTIVITY_LOGS, main.EXERCISE_RECORDS, main.CHECKINS, main.GOALS, main.ASSIGNMENTS, main.MEALS):
        store.clear()
    yield


def _post_workouts(subject_id="s1"):
    history = {
        "logs": [
            {"id": "w1", "subject_id": subject_id, "activity_date": "2024-03-05", "duration_minutes": 55},
            {"id": "w2", "subjectId": subject_id, "activityDate": "2024-03-04", "durationMinutes": 40},
        ],
        "records": [
            {
                "session_id": "w1",
                "primary_muscle": "chest",
                "sets": [{"completed": True, "reps": 5, "weight": 100}] * 3,
            },
            {"sessionId": "w2", "primaryMuscle": "back", "sets": [{"completed": True, "reps": 10, "weight": 50}]},
        ],
    }
    return client.post(f"/workouts/{subject_id}", json=history)


def test_workout_analytics_endpoint():
    assert _post_workouts().json() == {"logs": 2, "records": 2}

    response = client.get("/analytics/workouts/s1", params={"now": "2024-03-06", "days": 30})
    assert response.status_code == 200
    data = response.json()
    assert data["weeklyVolume"] == [
        {"week": "2024-03-04", "totalSets": 4, "totalReps": 25, "totalTonnage": 2000}
    ]
    assert data["weeklyFrequency"] == [{"week": "2024-03-04", "sessionCount": 2}]
    assert data["muscleDistribution"][0] == {"muscle": "chest", "count": 1}
    assert data["progressMetrics"]["currentStreak"] == 2


def test_workout_analytics_unknown_subject():
    response = client.get("/analytics/workouts/nobody", params={"now": "2024-03-06"})
    assert response.status_code == 404


def test_malformed_set_is_rejected():
    history = {
        "logs": [{"id": "w1", "subject_id": "s1", "activity_date": "2024-03-05"}],
        "records": [{"session_id": "w1", "sets": [{"completed": True, "weight": 100}]}],
    }
    assert client.post("/workouts/s1", json=history).status_code == 422


def test_malformed_date_is_rejected():
    history = {"logs": [{"id": "w1", "subject_id": "s1", "activity_date": "05/03/2024"}]}
    assert client.post("/workouts/s1", json=history).status_code == 422


def test_records_for_other_subject_rejected():
    response = client.post("/checkins/s1", json=[{"subject_id": "s2", "submitted_at": "2024-03-01T10:00:00"}])
    assert response.status_code == 422


def test_dashboard_endpoint():
    _post_workouts()
    client.post(
        "/assignments/s1",
        json=[{"id": "p1", "subject_id": "s1", "plan_type": "workout", "name": "Base", "start_date": "2024-03-01"}],
    )
    client.post("/checkins/s1", json=[{"subject_id": "s1", "submitted_at": "2024-02-20T10:00:00"}])
    client.post("/meals/s1", json=[{"logged_on": "2024-03-06", "quantity": 100, "food": CHICKEN}])

    response = client.get("/analytics/dashboard/s1", params={"now": "2024-03-06"})
    assert response.status_code == 200
    data = response.json()
    assert data["currentStreak"] == 2
    assert data["workoutsThisWeek"] == 2
    assert data["totalMinutesThisWeek"] == 95
    assert data["caloriesLoggedToday"] == 156
    assert data["nextCheckinDate"] == "2024-02-27"
    assert data["nextCheckinLabel"] == "Tue, Feb 27 (Overdue)"
    assert data["checkinOverdue"] is True
    assert data["activeWorkoutPlan"]["dayOfProgram"] == 6
    assert data["activeDietPlan"] is None


def test_dashboard_unknown_subject():
    assert client.get("/analytics/dashboard/nobody").status_code == 404


def test_leaderboard_endpoint():
    client.post(
        "/checkins/s1",
        json=[
            {"subject_id": "s1", "submitted_at": f"2024-0{m}-{d:02d}T10:00:00", "diet_adherence": 8, "workout_adherence": 8}
            for m, d in ((2, 10), (2, 17), (2, 24), (3, 2))
        ],
    )
    client.post("/goals/s1", json={"subject_id": "s1", "completed_count": 2, "active_count": 1})
    client.post("/checkins/s2", json=[{"subject_id": "s2", "submitted_at": "2024-03-01T10:00:00", "diet_adherence": 5}])

    response = client.post(
        "/analytics/leaderboard",
        json={"subject_ids": ["s2", "s1", "s3"], "now": "2024-03-06T12:00:00"},
    )
    assert response.status_code == 200
    board = response.json()
    assert [row["subjectId"] for row in board] == ["s1", "s2", "s3"]
    assert board[0]["score"] == 92
    assert board[0]["lastCheckinDate"] == "2024-03-02"
    assert board[2] == {
        "subjectId": "s3",
        "score": 0,
        "adherenceScore": 0,
        "consistencyScore": 0,
        "goalsCompleted": 0,
        "lastCheckinDate": None,
    }


def test_leaderboard_limit_and_export():
    subjects = [f"s{i}" for i in range(12)]
    short = client.post("/analytics/leaderboard", json={"subject_ids": subjects, "now": "2024-03-06T00:00:00"})
    full = client.post(
        "/analytics/leaderboard",
        json={"subject_ids": subjects, "now": "2024-03-06T00:00:00", "export": True},
    )
    assert len(short.json()) == 10
    assert len(full.json()) == 12


def test_scale_endpoint():
    response = client.post("/nutrition/scale", json={"food": CHICKEN, "quantity": 2, "unit": "serving"})
    assert response.status_code == 200
    assert response.json() == {"calories": 375, "protein": 74.4, "carbs": 0.0, "fat": 8.6, "fiber": 0.0}


def test_scale_rejects_negative_quantity():
    response = client.post("/nutrition/scale", json={"food": CHICKEN, "quantity": -1})
    assert response.status_code == 422


def test_recipe_endpoint():
    response = client.post(
        "/nutrition/recipe",
        json={"ingredients": [{"quantity": 200, "unit": "g", "food": CHICKEN}], "servings": 2},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"]["calories"] == 313
    assert data["perServing"] == {"calories": 156, "protein": 31.0, "carbs": 0.0, "fat": 3.6}


def test_leaderboard_repeated_subject_counted_once():
    client.post("/checkins/s1", json=[{"subject_id": "s1", "submitted_at": "2024-03-01T10:00:00", "diet_adherence": 6}])

    response = client.post(
        "/analytics/leaderboard",
        json={"subject_ids": ["s1", "s1"], "now": "2024-03-06T12:00:00"},
    )
    board = response.json()
    assert len(board) == 1
    assert board[0]["consistencyScore"] == 25
