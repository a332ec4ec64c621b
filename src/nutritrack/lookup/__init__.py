"""Nutrition lookup from the built-in food table."""

from __future__ import annotations

from nutritrack.lookup.fallback import (
    FOOD_TABLE,
    NutritionData,
    convert_to_grams,
    estimate_description,
    estimate_nutrition,
    find_food,
)

__all__ = [
    "FOOD_TABLE",
    "NutritionData",
    "convert_to_grams",
    "estimate_description",
    "estimate_nutrition",
    "find_food",
]
