"""Data models for body metrics and macro targets."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

logger = logging.getLogger(__name__)

class Gender(Enum):
    """Gender used to select the BMR equation."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(Enum):
    """Activity level, ordered from least to most active."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Light exercise 1-3 days/week
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    ACTIVE = "active"                # Hard exercise 6-7 days/week
    VERY_ACTIVE = "very_active"      # Very hard exercise, physical job


class Goal(Enum):
    """Body composition goal."""
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    GAIN_WEIGHT = "gain_weight"


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

# Calorie adjustment from TDEE by goal
GOAL_ADJUSTMENTS = {
    Goal.LOSE_WEIGHT: -500,      # ~0.5 kg/week loss
    Goal.MAINTAIN_WEIGHT: 0,
    Goal.GAIN_WEIGHT: 300,       # Lean surplus
}

# Share of calories from fat by goal
FAT_PERCENTAGES = {
    Goal.LOSE_WEIGHT: 0.25,
    Goal.MAINTAIN_WEIGHT: 0.25,
    Goal.GAIN_WEIGHT: 0.30,      # Higher fat for calorie density
}

PROTEIN_GRAMS_PER_KG = 1.8
SAFE_WEEKLY_CHANGE_KG = 0.5

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBOHYDRATE = 4
KCAL_PER_GRAM_FAT = 9


class NutritionError(Exception):
    """Base exception for nutritrack errors."""

    pass


class InvalidInputError(NutritionError):
    """Raised when body metrics fall outside the calculable domain."""

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message)
        self.field_name = field_name


@dataclass(frozen=True)
class NutritionPolicy:
    """Nutritional policy constants used by the target calculations.

    Defaults reproduce the standard targets. Override individual values
    through the ``nutrition`` section of the config file.
    """

    activity_multipliers: Mapping[ActivityLevel, float] = field(
        default_factory=lambda: dict(ACTIVITY_MULTIPLIERS)
    )
    goal_adjustments: Mapping[Goal, int] = field(
        default_factory=lambda: dict(GOAL_ADJUSTMENTS)
    )
    fat_percentages: Mapping[Goal, float] = field(
        default_factory=lambda: dict(FAT_PERCENTAGES)
    )
    protein_grams_per_kg: float = PROTEIN_GRAMS_PER_KG
    weekly_change_kg: float = SAFE_WEEKLY_CHANGE_KG
    strict_activity_level: bool = False

    def __post_init__(self) -> None:
        for level, multiplier in self.activity_multipliers.items():
            if not (math.isfinite(multiplier) and multiplier > 0):
                raise ValueError(
                    f"activity multiplier for {level.value} must be positive, "
                    f"got {multiplier}"
                )
        for goal, adjustment in self.goal_adjustments.items():
            if not math.isfinite(adjustment):
                raise ValueError(
                    f"goal adjustment for {goal.value} must be finite, got {adjustment}"
                )
        for goal, share in self.fat_percentages.items():
            if not (math.isfinite(share) and 0 < share < 1):
                raise ValueError(
                    f"fat percentage for {goal.value} must be between 0 and 1, "
                    f"got {share}"
                )
        if not (math.isfinite(self.protein_grams_per_kg)
                and self.protein_grams_per_kg > 0):
            raise ValueError(
                f"protein_grams_per_kg must be positive, got {self.protein_grams_per_kg}"
            )
        if not (math.isfinite(self.weekly_change_kg) and self.weekly_change_kg > 0):
            raise ValueError(
                f"weekly_change_kg must be positive, got {self.weekly_change_kg}"
            )


DEFAULT_POLICY = NutritionPolicy()


def parse_activity_level(
    value: ActivityLevel | str,
    strict: bool = False,
) -> ActivityLevel:
    """Parse an activity level, falling back to sedentary when unknown.

    Args:
        value: ActivityLevel or its string value (case-insensitive)
        strict: Raise instead of falling back

    Returns:
        Parsed ActivityLevel

    Raises:
        InvalidInputError: If strict and the value is not recognised
    """
    if isinstance(value, ActivityLevel):
        return value
    try:
        return ActivityLevel(str(value).strip().lower())
    except ValueError:
        if strict:
            raise InvalidInputError(
                f"activity_level must be one of "
                f"{[a.value for a in ActivityLevel]}, got '{value}'",
                "activity_level",
            ) from None
        logger.warning(
            "Unknown activity level %r, falling back to sedentary", value
        )
        return ActivityLevel.SEDENTARY


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class UserMetrics:
    """Body metrics and goal for a single target calculation."""

    weight: float               # kg
    height: float               # cm
    age: int                    # years
    gender: Gender
    activity_level: ActivityLevel
    goal: Goal
    current_body_fat_percentage: float = 0.0
    target_body_fat_percentage: float = 0.0

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        policy: NutritionPolicy = DEFAULT_POLICY,
    ) -> "UserMetrics":
        """Build metrics from a raw record.

        Accepts both snake_case keys and the camelCase keys used by
        stored user records (``activityLevel``, ``currentBodyFatPercentage``).

        Raises:
            InvalidInputError: If a required field is missing or an enum
                value is not recognised.
        """
        missing = [
            name for name in ("weight", "height", "age", "gender", "goal")
            if data.get(name) is None
        ]
        if missing:
            raise InvalidInputError(
                f"Missing required fields: {', '.join(missing)}", missing[0]
            )

        try:
            gender = Gender(str(data["gender"]).lower())
        except ValueError:
            raise InvalidInputError(
                f"gender must be one of {[g.value for g in Gender]}, "
                f"got '{data['gender']}'",
                "gender",
            ) from None
        try:
            goal = Goal(str(data["goal"]).lower())
        except ValueError:
            raise InvalidInputError(
                f"goal must be one of {[g.value for g in Goal]}, "
                f"got '{data['goal']}'",
                "goal",
            ) from None

        activity = parse_activity_level(
            _pick(data, "activity_level", "activityLevel", default="sedentary"),
            strict=policy.strict_activity_level,
        )

        try:
            return cls(
                weight=float(data["weight"]),
                height=float(data["height"]),
                age=int(data["age"]),
                gender=gender,
                activity_level=activity,
                goal=goal,
                current_body_fat_percentage=float(
                    _pick(data, "current_body_fat_percentage",
                          "currentBodyFatPercentage", default=0.0)
                ),
                target_body_fat_percentage=float(
                    _pick(data, "target_body_fat_percentage",
                          "targetBodyFatPercentage", default=0.0)
                ),
            )
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid body metrics: {e}") from e


@dataclass(frozen=True)
class MacroTargets:
    """Daily calorie and macronutrient targets."""

    calories: int       # kcal/day
    protein: int        # g/day
    carbohydrates: int  # g/day
    fat: int            # g/day

    def to_dict(self) -> dict:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbohydrates": self.carbohydrates,
            "fat": self.fat,
        }
