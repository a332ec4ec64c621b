"""Data models for daily food logging."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional

from nutritrack.profiles.models import InvalidInputError, MacroTargets


class Meal(Enum):
    """Meal slot a food entry belongs to."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidInputError(f"Invalid date: {value!r}", "date") from None


@dataclass
class FoodEntry:
    """A single logged food portion."""

    date: date
    food_name: str
    quantity: float
    unit: str  # 'grams', 'cups', 'pieces', etc.
    calories: float
    protein: float
    carbohydrates: float
    fat: float
    meal: Meal
    brand: Optional[str] = None
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None  # mg

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FoodEntry":
        """Build an entry from a record with snake_case or camelCase keys.

        Raises:
            InvalidInputError: If the record is not a mapping, or a required
                field is missing or invalid
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError(f"Food entry must be a mapping, got {data!r}")

        food_name = data.get("food_name", data.get("foodName"))
        required = {
            "date": data.get("date"),
            "food_name": food_name,
            "quantity": data.get("quantity"),
            "unit": data.get("unit"),
            "calories": data.get("calories"),
            "protein": data.get("protein"),
            "carbohydrates": data.get("carbohydrates"),
            "fat": data.get("fat"),
            "meal": data.get("meal"),
        }
        missing = [name for name, value in required.items() if value is None]
        if missing:
            raise InvalidInputError(
                f"Food entry missing fields: {', '.join(missing)}", missing[0]
            )

        try:
            meal = Meal(str(data["meal"]).lower())
        except ValueError:
            raise InvalidInputError(
                f"meal must be one of {[m.value for m in Meal]}, got '{data['meal']}'",
                "meal",
            ) from None

        def _optional(key: str) -> Optional[float]:
            value = data.get(key)
            return float(value) if value is not None else None

        try:
            return cls(
                date=_parse_date(data["date"]),
                food_name=str(food_name),
                quantity=float(data["quantity"]),
                unit=str(data["unit"]),
                calories=float(data["calories"]),
                protein=float(data["protein"]),
                carbohydrates=float(data["carbohydrates"]),
                fat=float(data["fat"]),
                meal=meal,
                brand=data.get("brand"),
                fiber=_optional("fiber"),
                sugar=_optional("sugar"),
                sodium=_optional("sodium"),
            )
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid food entry {food_name!r}: {e}") from e

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "food_name": self.food_name,
            "brand": self.brand,
            "quantity": self.quantity,
            "unit": self.unit,
            "calories": self.calories,
            "protein": self.protein,
            "carbohydrates": self.carbohydrates,
            "fat": self.fat,
            "fiber": self.fiber,
            "sugar": self.sugar,
            "sodium": self.sodium,
            "meal": self.meal.value,
        }


@dataclass
class DailyTotals:
    """Summed nutrients for a set of entries. Missing optionals count as 0."""

    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0

    def to_dict(self) -> dict:
        return {
            "calories": round(self.calories, 2),
            "protein": round(self.protein, 2),
            "carbohydrates": round(self.carbohydrates, 2),
            "fat": round(self.fat, 2),
            "fiber": round(self.fiber, 2),
            "sugar": round(self.sugar, 2),
            "sodium": round(self.sodium, 2),
        }


@dataclass
class DailySummary:
    """One day's intake compared against the daily targets."""

    day: date
    entries_by_meal: dict[Meal, list[FoodEntry]]
    totals: DailyTotals
    targets: MacroTargets
    progress: dict[str, float] = field(default_factory=dict)  # percent, capped at 100
    remaining_calories: float = 0.0

    @property
    def entry_count(self) -> int:
        return sum(len(entries) for entries in self.entries_by_meal.values())

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "entries": {
                meal.value: [entry.to_dict() for entry in entries]
                for meal, entries in self.entries_by_meal.items()
            },
            "totals": self.totals.to_dict(),
            "targets": self.targets.to_dict(),
            "progress": {k: round(v, 1) for k, v in self.progress.items()},
            "remaining_calories": round(self.remaining_calories, 2),
        }
