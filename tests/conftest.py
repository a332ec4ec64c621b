"""Pytest fixtures for nutritrack tests."""

from __future__ import annotations

from datetime import date

import pytest
import yaml

from nutritrack.config import settings as settings_module
from nutritrack.profiles import ActivityLevel, Gender, Goal, UserMetrics


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config loading at an empty temp location and drop cached settings."""
    config_path = tmp_path / "config" / "config.yaml"
    monkeypatch.setenv(settings_module.CONFIG_ENV_VAR, str(config_path))
    monkeypatch.setattr(settings_module, "_settings", None)
    return config_path


@pytest.fixture
def male_metrics() -> UserMetrics:
    """70 kg, 175 cm, 25 year old moderately active male cutting."""
    return UserMetrics(
        weight=70,
        height=175,
        age=25,
        gender=Gender.MALE,
        activity_level=ActivityLevel.MODERATE,
        goal=Goal.LOSE_WEIGHT,
        current_body_fat_percentage=20,
        target_body_fat_percentage=12,
    )


@pytest.fixture
def sample_entries() -> list[dict]:
    """Food log records across two days, in stored-record (camelCase) form."""
    return [
        {
            "date": "2026-10-19", "foodName": "Oats", "quantity": 80, "unit": "grams",
            "calories": 300, "protein": 10, "carbohydrates": 54, "fat": 5,
            "fiber": 8, "meal": "breakfast",
        },
        {
            "date": "2026-10-19", "foodName": "Chicken breast", "quantity": 200,
            "unit": "grams", "calories": 330, "protein": 62, "carbohydrates": 0,
            "fat": 7.2, "sodium": 148, "meal": "lunch",
        },
        {
            "date": "2026-10-19", "foodName": "Banana", "quantity": 1, "unit": "pieces",
            "calories": 89, "protein": 1.1, "carbohydrates": 23, "fat": 0.3,
            "sugar": 12, "meal": "snack",
        },
        {
            "date": "2026-10-18", "foodName": "Pasta", "quantity": 300, "unit": "grams",
            "calories": 393, "protein": 15, "carbohydrates": 75, "fat": 3.3,
            "meal": "dinner",
        },
    ]


@pytest.fixture
def entries_file(tmp_path, sample_entries):
    """Write sample entries to a YAML file."""
    path = tmp_path / "entries.yaml"
    path.write_text(yaml.safe_dump(sample_entries))
    return path


@pytest.fixture
def profile_file(tmp_path):
    """Write a stored user record with camelCase keys."""
    path = tmp_path / "profile.yaml"
    path.write_text(yaml.safe_dump({
        "weight": 70,
        "height": 175,
        "age": 25,
        "gender": "male",
        "activityLevel": "moderate",
        "goal": "lose_weight",
        "currentBodyFatPercentage": 20,
        "targetBodyFatPercentage": 12,
    }))
    return path


@pytest.fixture
def log_day() -> date:
    return date(2026, 10, 19)
