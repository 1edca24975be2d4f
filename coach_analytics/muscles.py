"""Primary-muscle hit counts."""
from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from .config import MUSCLE_TOP_N
from .errors import InvalidInputError
from .schemas import ExerciseSetRecord, MuscleCount

OTHER = "other"
_UNKNOWN_LABELS = {"", "unknown", "none", "n/a"}


def normalize_muscle(label: Optional[str]) -> str:
    if label is None:
        return OTHER
    cleaned = label.strip().lower()
    return OTHER if cleaned in _UNKNOWN_LABELS else cleaned


def muscle_distribution(records: Iterable[ExerciseSetRecord], limit: int = MUSCLE_TOP_N) -> List[MuscleCount]:
    """Top ``limit`` muscles by exercise count.

    Each record counts once regardless of its set count. Counter keeps
    first-seen order and ``sorted`` is stable, so ties stay in that order.
    """
    if limit < 0:
        raise InvalidInputError(f"limit must not be negative, got {limit}")
    counts = Counter(normalize_muscle(r.primary_muscle) for r in records)
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    return [MuscleCount(muscle=m, count=c) for m, c in ranked[:limit]]
