"""Body composition calculator for calorie and macro targets.

Calculates TDEE (Total Daily Energy Expenditure) and daily macronutrient
targets from body metrics and a goal (lose, maintain or gain weight).

BMR uses the revised Harris-Benedict coefficients (Roza & Shizgal), with
the female equation also applied to ``Gender.OTHER``. Every function here
is a pure calculation: no I/O and no shared state.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from nutritrack.profiles.models import (
    DEFAULT_POLICY,
    KCAL_PER_GRAM_CARBOHYDRATE,
    KCAL_PER_GRAM_FAT,
    KCAL_PER_GRAM_PROTEIN,
    ActivityLevel,
    Gender,
    Goal,
    InvalidInputError,
    MacroTargets,
    NutritionPolicy,
    UserMetrics,
    parse_activity_level,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return int(math.floor(value + 0.5))


def validate_metrics(metrics: UserMetrics) -> None:
    """Check that metrics are inside the domain the formulas accept.

    Raises:
        InvalidInputError: On non-finite values, non-positive weight, height
            or age, body fat outside 0-100, or a target body fat of 100% or more
    """
    for field_name in (
        "weight",
        "height",
        "age",
        "current_body_fat_percentage",
        "target_body_fat_percentage",
    ):
        value = getattr(metrics, field_name)
        if not math.isfinite(value):
            raise InvalidInputError(
                f"{field_name} must be a finite number, got {value}", field_name
            )

    if not metrics.weight > 0:
        raise InvalidInputError(
            f"weight must be positive, got {metrics.weight}", "weight"
        )
    if not metrics.height > 0:
        raise InvalidInputError(
            f"height must be positive, got {metrics.height}", "height"
        )
    if not metrics.age > 0:
        raise InvalidInputError(f"age must be positive, got {metrics.age}", "age")
    if not 0 <= metrics.current_body_fat_percentage <= 100:
        raise InvalidInputError(
            "current_body_fat_percentage must be between 0 and 100, "
            f"got {metrics.current_body_fat_percentage}",
            "current_body_fat_percentage",
        )
    if not 0 <= metrics.target_body_fat_percentage < 100:
        raise InvalidInputError(
            "target_body_fat_percentage must be at least 0 and below 100, "
            f"got {metrics.target_body_fat_percentage}",
            "target_body_fat_percentage",
        )


def calculate_bmr(
    weight: float,
    height: float,
    age: int,
    gender: Gender | str,
) -> float:
    """Calculate Basal Metabolic Rate.

    Args:
        weight: Weight in kilograms
        height: Height in centimeters
        age: Age in years
        gender: Gender (female equation is used for anything but male)

    Returns:
        BMR in calories per day (unbounded; extreme inputs can go negative)
    """
    if isinstance(gender, str):
        is_male = gender.strip().lower() == Gender.MALE.value
    else:
        is_male = gender == Gender.MALE

    if is_male:
        return 88.362 + (13.397 * weight) + (4.799 * height) - (5.677 * age)
    return 447.593 + (9.247 * weight) + (3.098 * height) - (4.330 * age)


def calculate_tdee(
    bmr: float,
    activity_level: ActivityLevel | str,
    policy: NutritionPolicy = DEFAULT_POLICY,
) -> float:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: Activity level; unknown strings fall back to
            sedentary unless the policy is strict
        policy: Nutrition policy constants

    Returns:
        TDEE in calories per day
    """
    level = parse_activity_level(activity_level, strict=policy.strict_activity_level)
    return bmr * policy.activity_multipliers[level]


def calculate_calorie_target(
    metrics: UserMetrics,
    policy: NutritionPolicy = DEFAULT_POLICY,
) -> int:
    """Calculate the goal-adjusted daily calorie target.

    Returns:
        round(TDEE + goal adjustment) in kcal/day
    """
    bmr = calculate_bmr(metrics.weight, metrics.height, metrics.age, metrics.gender)
    tdee = calculate_tdee(bmr, metrics.activity_level, policy)
    adjustment = policy.goal_adjustments.get(metrics.goal, 0)
    return _round_half_up(tdee + adjustment)


def calculate_macro_targets(
    metrics: UserMetrics,
    policy: NutritionPolicy = DEFAULT_POLICY,
) -> MacroTargets:
    """Calculate daily calorie and macro targets.

    Protein is fixed per kg of body weight, fat is a share of calories
    chosen by goal, and carbohydrates take whatever calories remain
    (never below zero). Each step consumes the rounded result of the
    previous one.

    Args:
        metrics: Validated body metrics
        policy: Nutrition policy constants

    Returns:
        MacroTargets in kcal and grams per day

    Raises:
        InvalidInputError: If metrics are outside the calculable domain
    """
    validate_metrics(metrics)

    calories = calculate_calorie_target(metrics, policy)

    protein = _round_half_up(policy.protein_grams_per_kg * metrics.weight)
    protein_calories = protein * KCAL_PER_GRAM_PROTEIN

    fat_percentage = policy.fat_percentages.get(metrics.goal, 0.25)
    fat = _round_half_up(calories * fat_percentage / KCAL_PER_GRAM_FAT)
    fat_calories = fat * KCAL_PER_GRAM_FAT

    carb_calories = calories - protein_calories - fat_calories
    carbohydrates = max(0, _round_half_up(carb_calories / KCAL_PER_GRAM_CARBOHYDRATE))

    if carb_calories < 0:
        logger.debug(
            "Protein and fat exceed %d kcal by %d, carbohydrates clamped to 0",
            calories,
            -carb_calories,
        )

    return MacroTargets(
        calories=calories,
        protein=protein,
        carbohydrates=carbohydrates,
        fat=fat,
    )


def calculate_lean_body_mass(weight: float, body_fat_percentage: float) -> float:
    """Body weight excluding fat mass, in the same unit as ``weight``."""
    return weight * (1 - body_fat_percentage / 100)


def estimate_time_to_target(
    current_weight: float,
    current_body_fat: float,
    target_body_fat: float,
    goal: Goal | str | None = None,
    policy: NutritionPolicy = DEFAULT_POLICY,
) -> int:
    """Estimate weeks needed to reach a target body fat percentage.

    Lean mass is held constant, so the target weight is the weight at
    which the current lean mass makes up ``100 - target_body_fat`` percent.
    The weight difference is covered at a fixed safe weekly rate.

    Args:
        current_weight: Current weight in kg
        current_body_fat: Current body fat percentage
        target_body_fat: Target body fat percentage (below 100)
        goal: Accepted for callers that pass it; does not change the estimate
        policy: Nutrition policy constants

    Returns:
        Weeks to target, rounded up

    Raises:
        InvalidInputError: If target_body_fat is 100 or more
    """
    target_weight = calculate_target_weight(
        current_weight, current_body_fat, target_body_fat
    )
    weight_difference = abs(target_weight - current_weight)

    return math.ceil(weight_difference / policy.weekly_change_kg)


def calculate_target_weight(current_weight: float, current_body_fat: float,
                            target_body_fat: float) -> float:
    """Weight at target body fat with lean mass held constant.

    Raises:
        InvalidInputError: If a value is not finite or target_body_fat
            is 100 or more
    """
    for name, value in (
        ("current_weight", current_weight),
        ("current_body_fat", current_body_fat),
        ("target_body_fat", target_body_fat),
    ):
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value}", name)
    if target_body_fat >= 100:
        raise InvalidInputError(
            f"target_body_fat must be below 100, got {target_body_fat}",
            "target_body_fat",
        )
    lean_mass = calculate_lean_body_mass(current_weight, current_body_fat)
    return lean_mass / (1 - target_body_fat / 100)


def build_target_report(
    metrics: UserMetrics,
    policy: NutritionPolicy = DEFAULT_POLICY,
) -> dict:
    """Collect targets and reference values for display or JSON output."""
    targets = calculate_macro_targets(metrics, policy)
    bmr = calculate_bmr(metrics.weight, metrics.height, metrics.age, metrics.gender)
    tdee = calculate_tdee(bmr, metrics.activity_level, policy)

    projection: Optional[dict] = None
    if metrics.current_body_fat_percentage > 0 and metrics.target_body_fat_percentage > 0:
        projection = {
            "lean_body_mass_kg": round(
                calculate_lean_body_mass(
                    metrics.weight, metrics.current_body_fat_percentage
                ),
                1,
            ),
            "target_weight_kg": round(
                calculate_target_weight(
                    metrics.weight,
                    metrics.current_body_fat_percentage,
                    metrics.target_body_fat_percentage,
                ),
                1,
            ),
            "weeks_to_target": estimate_time_to_target(
                metrics.weight,
                metrics.current_body_fat_percentage,
                metrics.target_body_fat_percentage,
                metrics.goal,
                policy,
            ),
        }

    return {
        "targets": targets.to_dict(),
        "reference": {
            "bmr": round(bmr, 1),
            "tdee": round(tdee, 1),
            "goal_adjustment": policy.goal_adjustments.get(metrics.goal, 0),
            "activity_level": metrics.activity_level.value,
            "goal": metrics.goal.value,
        },
        "projection": projection,
    }
