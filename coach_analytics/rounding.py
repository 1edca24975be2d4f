"""Half-up rounding shared by every rollup in the engine.

Python's built-in ``round`` rounds halves to even, which would make 0.5 kcal
or 72.5 points land differently depending on parity. Every figure the engine
emits goes through these helpers so independent call sites agree.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, ndigits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    return int(round_half_up(value, 0))
