"""Static nutrition table used when no external lookup is available.

Values are per 100g. Foods are matched by name (exact first, then the first
partial match in either direction), and quantities are converted to grams
with rough per-unit weights.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Optional

from nutritrack.profiles.models import InvalidInputError

logger = logging.getLogger(__name__)


def _round2(value: float, factor: float) -> float:
    """Scale and round half up to 2 decimals. Ties go up, unlike round()."""
    return math.floor(value * factor * 100 + 0.5) / 100


@dataclass(frozen=True)
class NutritionData:
    """Nutrition values for a food portion."""

    calories: float        # kcal
    protein: float         # g
    carbohydrates: float   # g
    fat: float             # g
    fiber: Optional[float] = None   # g
    sugar: Optional[float] = None   # g
    sodium: Optional[float] = None  # mg

    def to_dict(self) -> dict:
        return asdict(self)

    def scaled(self, factor: float) -> "NutritionData":
        """Scale every value by factor, rounding half up to 2 decimals.

        Optional values that are zero or missing stay None.
        """
        def _scale(value: Optional[float]) -> Optional[float]:
            if not value:
                return None
            return _round2(value, factor)

        return NutritionData(
            calories=_round2(self.calories, factor),
            protein=_round2(self.protein, factor),
            carbohydrates=_round2(self.carbohydrates, factor),
            fat=_round2(self.fat, factor),
            fiber=_scale(self.fiber),
            sugar=_scale(self.sugar),
            sodium=_scale(self.sodium),
        )


# name: (calories, protein, carbohydrates, fat, fiber, sugar, sodium) per 100g
_FOOD_ROWS = {
    # Proteins
    "chicken breast": (165, 31, 0, 3.6, 0, 0, 74),
    "chicken": (165, 31, 0, 3.6, 0, 0, 74),
    "salmon": (208, 22, 0, 12, 0, 0, 93),
    "tuna": (132, 28, 0, 1, 0, 0, 47),
    "egg": (155, 13, 1.1, 11, 0, 1.1, 124),
    "beef": (250, 26, 0, 15, 0, 0, 72),
    "pork": (242, 27, 0, 14, 0, 0, 62),
    "tofu": (76, 8, 1.9, 4.8, 0.3, 0.6, 7),
    # Protein supplements
    "whey protein": (380, 80, 6, 4, 1, 4, 200),
    "whey": (380, 80, 6, 4, 1, 4, 200),
    "protein powder": (380, 80, 6, 4, 1, 4, 200),
    "casein protein": (360, 75, 8, 2, 0, 6, 180),
    # Carbohydrates
    "rice": (130, 2.7, 28, 0.3, 0.4, 0.1, 1),
    "white rice": (130, 2.7, 28, 0.3, 0.4, 0.1, 1),
    "brown rice": (111, 2.6, 23, 0.9, 1.8, 0.4, 5),
    "bread": (265, 9, 49, 3.2, 2.7, 5, 491),
    "pasta": (131, 5, 25, 1.1, 1.8, 0.8, 6),
    "potato": (77, 2, 17, 0.1, 2.2, 0.8, 6),
    "sweet potato": (86, 1.6, 20, 0.1, 3, 4.2, 6),
    "oats": (68, 2.4, 12, 1.4, 1.7, 0.3, 49),
    # Vegetables
    "broccoli": (34, 2.8, 7, 0.4, 2.6, 1.5, 33),
    "spinach": (23, 2.9, 3.6, 0.4, 2.2, 0.4, 79),
    "carrots": (41, 0.9, 10, 0.2, 2.8, 4.7, 69),
    "tomato": (18, 0.9, 3.9, 0.2, 1.2, 2.6, 5),
    "cucumber": (16, 0.7, 4, 0.1, 0.5, 1.7, 2),
    "lettuce": (15, 1.4, 2.9, 0.2, 1.3, 0.8, 28),
    "onion": (40, 1.1, 9.3, 0.1, 1.7, 4.2, 4),
    "bell pepper": (31, 1, 7, 0.3, 2.5, 4.2, 4),
    # Fruits
    "banana": (89, 1.1, 23, 0.3, 2.6, 12, 1),
    "apple": (52, 0.3, 14, 0.2, 2.4, 10, 1),
    "orange": (47, 0.9, 12, 0.1, 2.4, 9.4, 0),
    "strawberry": (32, 0.7, 8, 0.3, 2, 4.9, 1),
    "grapes": (62, 0.6, 16, 0.2, 0.9, 16, 3),
    # Nuts & seeds
    "almonds": (579, 21, 22, 50, 12, 4.4, 1),
    "walnuts": (654, 15, 14, 65, 6.7, 2.6, 2),
    "peanuts": (567, 26, 16, 49, 8.5, 4.7, 18),
    # Dairy
    "milk": (42, 3.4, 5, 1, 0, 5, 44),
    "yogurt": (59, 10, 3.6, 0.4, 0, 3.6, 36),
    "cheese": (113, 7, 1, 9, 0, 1, 621),
}

FOOD_TABLE: dict[str, NutritionData] = {
    name: NutritionData(*row) for name, row in _FOOD_ROWS.items()
}

# Used when a food matches nothing in the table
GENERIC_FOOD = NutritionData(100, 5, 15, 3, 2, 2, 50)

# Typical mixed meal, used for free-text descriptions
MEAL_ESTIMATE = NutritionData(400, 15, 60, 10, 8, 5, 800)

# Approximate grams per unit
UNIT_GRAMS = {
    "grams": 1,
    "ounces": 28.35,
    "cups": 240,      # Liquids
    "pieces": 100,    # Average piece
    "slices": 30,     # Average slice
    "tbsp": 15,
    "tsp": 5,
    "scoop": 30,      # Standard protein scoop
}
DEFAULT_UNIT_GRAMS = 100


def convert_to_grams(quantity: float, unit: str) -> float:
    """Convert a quantity in the given unit to grams.

    Unknown units count as 100g each.
    """
    return quantity * UNIT_GRAMS.get(unit.strip().lower(), DEFAULT_UNIT_GRAMS)


def find_food(name: str) -> Optional[tuple[str, NutritionData]]:
    """Find a food in the table.

    Args:
        name: Food name (case-insensitive)

    Returns:
        (matched_name, per-100g data), or None if nothing matches
    """
    query = name.strip().lower()
    if not query:
        return None

    if query in FOOD_TABLE:
        return query, FOOD_TABLE[query]

    for key, data in FOOD_TABLE.items():
        if key in query or query in key:
            return key, data

    return None


def estimate_nutrition(food_name: str, quantity: float, unit: str) -> NutritionData:
    """Estimate nutrition for a quantity of a named food.

    Args:
        food_name: Food name, e.g. "grilled chicken breast"
        quantity: Amount in ``unit``
        unit: One of UNIT_GRAMS keys; anything else counts as 100g

    Returns:
        NutritionData scaled to the portion

    Raises:
        InvalidInputError: If quantity is not positive
    """
    if quantity <= 0:
        raise InvalidInputError(f"quantity must be positive, got {quantity}", "quantity")

    match = find_food(food_name)
    if match is None:
        logger.info("No table entry for %r, using generic values", food_name)
        base = GENERIC_FOOD
    else:
        matched_name, base = match
        logger.debug("Matched %r to %r", food_name, matched_name)

    grams = convert_to_grams(quantity, unit)
    return base.scaled(grams / 100)


def estimate_description(description: str) -> NutritionData:
    """Estimate a free-text meal description with a typical mixed meal."""
    if not description.strip():
        raise InvalidInputError("description must not be empty", "description")
    return MEAL_ESTIMATE
