"""Macro target engine.

Converts body metrics into daily calorie and macronutrient targets, plus
lean body mass and time-to-target estimates for goal reporting.
"""

from __future__ import annotations

from nutritrack.profiles.body_calc import (
    build_target_report,
    calculate_bmr,
    calculate_calorie_target,
    calculate_lean_body_mass,
    calculate_macro_targets,
    calculate_target_weight,
    calculate_tdee,
    estimate_time_to_target,
    validate_metrics,
)
from nutritrack.profiles.models import (
    ActivityLevel,
    Gender,
    Goal,
    InvalidInputError,
    MacroTargets,
    NutritionError,
    NutritionPolicy,
    UserMetrics,
    parse_activity_level,
)

__all__ = [
    "ActivityLevel",
    "Gender",
    "Goal",
    "InvalidInputError",
    "MacroTargets",
    "NutritionError",
    "NutritionPolicy",
    "UserMetrics",
    "build_target_report",
    "calculate_bmr",
    "calculate_calorie_target",
    "calculate_lean_body_mass",
    "calculate_macro_targets",
    "calculate_target_weight",
    "calculate_tdee",
    "estimate_time_to_target",
    "parse_activity_level",
    "validate_metrics",
]
