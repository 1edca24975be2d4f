import pytest

from coach_analytics.errors import InvalidInputError
from coach_analytics.muscles import muscle_distribution, normalize_muscle
from coach_analytics.schemas import ExerciseSetRecord


def _records(*muscles):
    return [ExerciseSetRecord(session_id=f"s{i}", primary_muscle=m) for i, m in enumerate(muscles)]


def test_counts_one_per_record():
    records = [
        ExerciseSetRecord(session_id="a", primary_muscle="chest", sets=[{"completed": True, "reps": 5}] * 4),
        ExerciseSetRecord(session_id="a", primary_muscle="chest"),
    ]
    result = muscle_distribution(records)
    assert [(m.muscle, m.count) for m in result] == [("chest", 2)]


def test_sorted_descending_with_first_seen_ties():
    result = muscle_distribution(_records("back", "chest", "legs", "chest", "legs", "shoulders"))
    assert [(m.muscle, m.count) for m in result] == [
        ("chest", 2),
        ("legs", 2),
        ("back", 1),
        ("shoulders", 1),
    ]


def test_unknown_labels_fall_into_other():
    result = muscle_distribution(_records(None, "", "Unknown", "  ", "quads"))
    assert result[0].muscle == "other"
    assert result[0].count == 4
    assert normalize_muscle(" Glutes ") == "glutes"


def test_top_eight_only():
    muscles = ["m%d" % i for i in range(12) for _ in range(12 - i)]
    result = muscle_distribution(_records(*muscles))
    assert len(result) == 8
    counts = [m.count for m in result]
    assert counts == sorted(counts, reverse=True)
    assert result[0].muscle == "m0"


def test_empty_records():
    assert muscle_distribution([]) == []


def test_negative_limit_rejected():
    with pytest.raises(InvalidInputError):
        muscle_distribution(_records("chest", "back", "legs"), limit=-1)


def test_zero_limit_returns_nothing():
    assert muscle_distribution(_records("chest"), limit=0) == []
