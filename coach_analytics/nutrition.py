"""Deterministic nutrition math.

Calories are always derived from macros with the 4/4/9 rule; no stored
calorie figure is ever trusted. Every rollup rounds once per field, at the
end, so per-ingredient and per-recipe totals stay within 0.1 g of each other.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, Optional

from .config import GRAMS_PER_UNIT, KCAL_PER_GRAM
from .dates import DateLike, to_date
from .errors import InvalidInputError
from .rounding import round_half_up, round_int
from .schemas import Food, MacroSplit, MacroTotals, MealEntry, NutritionFacts, RecipeIngredient

logger = logging.getLogger(__name__)


def calories_from_macros(protein_g: float, carbs_g: float, fat_g: float) -> int:
    return round_int(
        (protein_g or 0) * KCAL_PER_GRAM["protein"]
        + (carbs_g or 0) * KCAL_PER_GRAM["carbs"]
        + (fat_g or 0) * KCAL_PER_GRAM["fat"]
    )


def grams_for(food: Food, quantity: float, unit: Optional[str] = "g") -> float:
    """Convert ``quantity`` expressed in ``unit`` to grams.

    ``serving`` multiplies by the food's default serving size; a food without
    one treats the quantity as grams, as does any unit we do not recognise.
    """
    if quantity is None or quantity < 0:
        raise InvalidInputError(f"Quantity must be a non-negative number, got {quantity!r}")
    key = (unit or "g").strip().lower()
    if key == "serving":
        if food.default_serving_size > 0:
            return quantity * food.default_serving_size
        return float(quantity)
    return quantity * GRAMS_PER_UNIT.get(key, 1.0)


def _raw_macros(food: Food, quantity: float, unit: Optional[str]) -> Dict[str, float]:
    multiplier = grams_for(food, quantity, unit) / 100.0
    return {
        "protein": food.protein_per_100g * multiplier,
        "carbs": food.carbs_per_100g * multiplier,
        "fat": food.fat_per_100g * multiplier,
        "fiber": food.fiber_per_100g * multiplier,
    }


def scale_nutrition(food: Food, quantity: float, unit: Optional[str] = "g") -> NutritionFacts:
    raw = _raw_macros(food, quantity, unit)
    protein = round_half_up(raw["protein"], 1)
    carbs = round_half_up(raw["carbs"], 1)
    fat = round_half_up(raw["fat"], 1)
    return NutritionFacts(
        calories=calories_from_macros(protein, carbs, fat),
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=round_half_up(raw["fiber"], 1),
    )


def _totals(raw_items: Iterable[Dict[str, float]]) -> MacroTotals:
    protein = carbs = fat = 0.0
    for raw in raw_items:
        protein += raw["protein"]
        carbs += raw["carbs"]
        fat += raw["fat"]
    protein = round_half_up(protein, 1)
    carbs = round_half_up(carbs, 1)
    fat = round_half_up(fat, 1)
    return MacroTotals(
        calories=calories_from_macros(protein, carbs, fat),
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


def rollup_recipe(ingredients: Iterable[RecipeIngredient]) -> MacroTotals:
    ingredients = list(ingredients)
    totals = _totals(_raw_macros(i.food, i.quantity, i.unit) for i in ingredients)
    logger.debug("Rolled up %d ingredients to %s kcal", len(ingredients), totals.calories)
    return totals


def per_serving(totals: MacroTotals, servings: int) -> MacroTotals:
    if servings < 1:
        raise InvalidInputError(f"A recipe needs at least one serving, got {servings}")
    protein = round_half_up(totals.protein / servings, 1)
    carbs = round_half_up(totals.carbs / servings, 1)
    fat = round_half_up(totals.fat / servings, 1)
    return MacroTotals(
        calories=calories_from_macros(protein, carbs, fat),
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


def rollup_meals(entries: Iterable[MealEntry], day: DateLike) -> MacroTotals:
    """Sum everything logged on ``day``."""
    target: date = to_date(day)
    return _totals(
        _raw_macros(e.food, e.quantity, e.unit) for e in entries if e.logged_on == target
    )


def macro_split(protein_g: float, carbs_g: float, fat_g: float, calorie_target: float) -> MacroSplit:
    """Share of ``calorie_target`` supplied by each macro, in whole percent."""
    if not calorie_target or calorie_target <= 0:
        return MacroSplit(protein_pct=0, carbs_pct=0, fat_pct=0)
    return MacroSplit(
        protein_pct=round_int((protein_g or 0) * KCAL_PER_GRAM["protein"] / calorie_target * 100),
        carbs_pct=round_int((carbs_g or 0) * KCAL_PER_GRAM["carbs"] / calorie_target * 100),
        fat_pct=round_int((fat_g or 0) * KCAL_PER_GRAM["fat"] / calorie_target * 100),
    )
