"""Tests for settings loading and policy overrides."""

from __future__ import annotations

import pytest
import yaml

from nutritrack.config import ConfigError, Settings, get_settings, reload_settings
from nutritrack.profiles import ActivityLevel, Goal, NutritionPolicy


class TestSettings:
    """Tests for Settings load/save."""

    def test_defaults_when_missing(self, isolated_config) -> None:
        assert not isolated_config.exists()
        settings = Settings.load()
        policy = settings.policy
        assert policy.activity_multipliers[ActivityLevel.MODERATE] == 1.55
        assert policy.goal_adjustments[Goal.LOSE_WEIGHT] == -500
        assert policy.protein_grams_per_kg == 1.8
        assert policy.strict_activity_level is False
        assert settings.defaults.output_format == "table"

    def test_partial_override_merges(self, isolated_config) -> None:
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(yaml.safe_dump({
            "nutrition": {
                "goal_adjustments": {"lose_weight": -400},
                "protein_grams_per_kg": 2.0,
                "strict_activity_level": True,
            },
            "defaults": {"output_format": "json"},
        }))

        policy = Settings.load().policy
        assert policy.goal_adjustments[Goal.LOSE_WEIGHT] == -400
        assert policy.goal_adjustments[Goal.GAIN_WEIGHT] == 300
        assert policy.protein_grams_per_kg == 2.0
        assert policy.strict_activity_level is True

    def test_round_trip(self, tmp_path) -> None:
        settings = Settings()
        settings.nutrition.weekly_change_kg = 0.75
        path = settings.save(tmp_path / "nested" / "config.yaml")
        assert Settings.load(path).nutrition.weekly_change_kg == 0.75

    def test_unknown_key_is_config_error(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "nutrition": {"activity_multipliers": {"extreme": 2.2}},
        }))
        with pytest.raises(ConfigError):
            Settings.load(path).policy

    def test_global_settings_cached(self, tmp_path) -> None:
        assert get_settings() is get_settings()
        path = tmp_path / "config.yaml"
        Settings().save(path)
        reloaded = reload_settings(path)
        assert get_settings() is reloaded

    @pytest.mark.parametrize(
        "nutrition",
        [
            {"weekly_change_kg": 0},
            {"weekly_change_kg": -0.5},
            {"protein_grams_per_kg": "lots"},
            {"activity_multipliers": {"moderate": 0}},
            {"fat_percentages": {"gain_weight": 1.5}},
            {"goal_adjustments": {"lose_weight": float("inf")}},
        ],
    )
    def test_unusable_value_is_config_error(self, tmp_path, nutrition: dict) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"nutrition": nutrition}))
        settings = Settings.load(path)
        with pytest.raises(ConfigError):
            settings.policy

    def test_malformed_yaml_is_config_error(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("nutrition: [unclosed\n")
        with pytest.raises(ConfigError):
            Settings.load(path)

    def test_non_mapping_section_is_config_error(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("nutrition: 5\n")
        with pytest.raises(ConfigError):
            Settings.load(path)


class TestNutritionPolicy:
    """Tests for policy value checks."""

    def test_defaults_are_valid(self) -> None:
        policy = NutritionPolicy()
        assert policy.weekly_change_kg == 0.5

    @pytest.mark.parametrize(
        "overrides",
        [
            {"weekly_change_kg": 0.0},
            {"weekly_change_kg": float("nan")},
            {"protein_grams_per_kg": -1.0},
            {"fat_percentages": {Goal.LOSE_WEIGHT: 0.0}},
            {"activity_multipliers": {ActivityLevel.ACTIVE: float("inf")}},
        ],
    )
    def test_rejects_unusable_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            NutritionPolicy(**overrides)
