"""Daily food logging computations.

Key components:
- Food entry and daily totals models
- Per-meal grouping and nutrient sums
- Progress against daily macro targets (capped at 100%)
"""

from __future__ import annotations

from nutritrack.tracking.daily import (
    entries_for_day,
    group_by_meal,
    load_entries,
    progress_percentage,
    remaining_calories,
    sum_entries,
    summarize_day,
)
from nutritrack.tracking.models import DailySummary, DailyTotals, FoodEntry, Meal

__all__ = [
    "DailySummary",
    "DailyTotals",
    "FoodEntry",
    "Meal",
    "entries_for_day",
    "group_by_meal",
    "load_entries",
    "progress_percentage",
    "remaining_calories",
    "sum_entries",
    "summarize_day",
]
