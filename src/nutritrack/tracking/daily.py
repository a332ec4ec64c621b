"""Daily intake totals and progress against macro targets."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterable

import yaml

from nutritrack.profiles.models import InvalidInputError, MacroTargets
from nutritrack.tracking.models import DailySummary, DailyTotals, FoodEntry, Meal

logger = logging.getLogger(__name__)


def entries_for_day(entries: Iterable[FoodEntry], day: date) -> list[FoodEntry]:
    """Return entries logged on the given day, in input order."""
    return [entry for entry in entries if entry.date == day]


def sum_entries(entries: Iterable[FoodEntry]) -> DailyTotals:
    """Sum nutrients across entries."""
    totals = DailyTotals()
    for entry in entries:
        totals.calories += entry.calories
        totals.protein += entry.protein
        totals.carbohydrates += entry.carbohydrates
        totals.fat += entry.fat
        totals.fiber += entry.fiber or 0
        totals.sugar += entry.sugar or 0
        totals.sodium += entry.sodium or 0
    return totals


def group_by_meal(entries: Iterable[FoodEntry]) -> dict[Meal, list[FoodEntry]]:
    """Group entries by meal. Only meals with entries appear, in first-seen order."""
    grouped: dict[Meal, list[FoodEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.meal, []).append(entry)
    return grouped


def progress_percentage(current: float, target: float) -> float:
    """Percent of target reached, capped at 100. A non-positive target gives 0."""
    if target <= 0:
        return 0.0
    return min(current / target * 100, 100.0)


def remaining_calories(totals: DailyTotals, targets: MacroTargets) -> float:
    """Calories left for the day, never below zero."""
    return max(0.0, targets.calories - totals.calories)


def summarize_day(
    entries: Iterable[FoodEntry],
    targets: MacroTargets,
    day: date,
) -> DailySummary:
    """Build the summary for one day.

    Args:
        entries: Food entries (any days; filtered to ``day``)
        targets: Daily macro targets
        day: Day to summarize

    Returns:
        DailySummary with totals, per-meal grouping and progress
    """
    todays = entries_for_day(entries, day)
    totals = sum_entries(todays)

    progress = {
        "calories": progress_percentage(totals.calories, targets.calories),
        "protein": progress_percentage(totals.protein, targets.protein),
        "carbohydrates": progress_percentage(totals.carbohydrates, targets.carbohydrates),
        "fat": progress_percentage(totals.fat, targets.fat),
    }

    logger.debug("Summarized %d entries for %s", len(todays), day)

    return DailySummary(
        day=day,
        entries_by_meal=group_by_meal(todays),
        totals=totals,
        targets=targets,
        progress=progress,
        remaining_calories=remaining_calories(totals, targets),
    )


def load_records(path: Path) -> object:
    """Read a JSON or YAML file (chosen by suffix; YAML otherwise).

    Raises:
        InvalidInputError: If the file cannot be parsed
    """
    with open(path) as f:
        try:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise InvalidInputError(f"Could not parse {path}: {e}") from e


def load_entries(path: Path) -> list[FoodEntry]:
    """Load food entries from a JSON or YAML file.

    The file holds either a list of entries or a mapping with an
    ``entries`` list.

    Raises:
        InvalidInputError: If the file cannot be parsed or does not contain
            a list of entry mappings
    """
    data = load_records(path)
    if isinstance(data, dict):
        data = data.get("entries")
    if not isinstance(data, list):
        raise InvalidInputError(f"{path} does not contain a list of food entries")

    entries = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise InvalidInputError(
                f"{path}: entry {index + 1} is not a mapping, got {record!r}"
            )
        entries.append(FoodEntry.from_dict(record))
    return entries
