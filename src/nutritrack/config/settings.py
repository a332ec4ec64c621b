"""Application settings and configuration management."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from nutritrack.profiles.models import (
    ACTIVITY_MULTIPLIERS,
    FAT_PERCENTAGES,
    GOAL_ADJUSTMENTS,
    PROTEIN_GRAMS_PER_KG,
    SAFE_WEEKLY_CHANGE_KG,
    ActivityLevel,
    Goal,
    NutritionError,
    NutritionPolicy,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NUTRITRACK_CONFIG"


class ConfigError(NutritionError):
    """Raised when the config file holds values the calculations cannot use."""

    pass


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".nutritrack"


def default_config_path() -> Path:
    """Return the config path, honouring NUTRITRACK_CONFIG."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return _default_config_dir() / "config.yaml"


@dataclass
class NutritionConfig:
    """Overrides for the nutritional policy constants."""

    activity_multipliers: dict[str, float] = field(
        default_factory=lambda: {k.value: v for k, v in ACTIVITY_MULTIPLIERS.items()}
    )
    goal_adjustments: dict[str, int] = field(
        default_factory=lambda: {k.value: v for k, v in GOAL_ADJUSTMENTS.items()}
    )
    fat_percentages: dict[str, float] = field(
        default_factory=lambda: {k.value: v for k, v in FAT_PERCENTAGES.items()}
    )
    protein_grams_per_kg: float = PROTEIN_GRAMS_PER_KG
    weekly_change_kg: float = SAFE_WEEKLY_CHANGE_KG
    strict_activity_level: bool = False

    def to_policy(self) -> NutritionPolicy:
        """Build the policy object used by the calculations.

        Raises:
            ConfigError: If a key is not a known activity level or goal,
                or a value is not a usable number
        """
        try:
            return self._build_policy()
        except (TypeError, ValueError, OverflowError) as e:
            raise ConfigError(f"Invalid nutrition config: {e}") from e

    def _build_policy(self) -> NutritionPolicy:
        return NutritionPolicy(
            activity_multipliers={
                ActivityLevel(k): float(v) for k, v in self.activity_multipliers.items()
            },
            goal_adjustments={
                Goal(k): int(v) for k, v in self.goal_adjustments.items()
            },
            fat_percentages={
                Goal(k): float(v) for k, v in self.fat_percentages.items()
            },
            protein_grams_per_kg=float(self.protein_grams_per_kg),
            weekly_change_kg=float(self.weekly_change_kg),
            strict_activity_level=self.strict_activity_level,
        )


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table" or "json"


@dataclass
class Settings:
    """Main application settings."""

    nutrition: NutritionConfig = field(default_factory=NutritionConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @property
    def policy(self) -> NutritionPolicy:
        return self.nutrition.to_policy()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses $NUTRITRACK_CONFIG
                or ~/.nutritrack/config.yaml

        Returns:
            Settings instance

        Raises:
            ConfigError: If the file is not valid YAML or its sections are
                not mappings. Numeric values are checked by ``policy``.
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            logger.debug("No config at %s, using defaults", config_path)
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e

        try:
            settings = cls._from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config in {config_path}: {e}") from e

        logger.debug("Loaded settings from %s", config_path)
        return settings

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        if not isinstance(data, dict):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")

        settings = cls()

        # Parse nutrition policy overrides; partial tables merge onto defaults
        if "nutrition" in data:
            nut_data = data["nutrition"] or {}
            if "activity_multipliers" in nut_data:
                settings.nutrition.activity_multipliers.update(
                    nut_data["activity_multipliers"]
                )
            if "goal_adjustments" in nut_data:
                settings.nutrition.goal_adjustments.update(nut_data["goal_adjustments"])
            if "fat_percentages" in nut_data:
                settings.nutrition.fat_percentages.update(nut_data["fat_percentages"])
            if "protein_grams_per_kg" in nut_data:
                settings.nutrition.protein_grams_per_kg = nut_data["protein_grams_per_kg"]
            if "weekly_change_kg" in nut_data:
                settings.nutrition.weekly_change_kg = nut_data["weekly_change_kg"]
            if "strict_activity_level" in nut_data:
                settings.nutrition.strict_activity_level = bool(
                    nut_data["strict_activity_level"]
                )

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> Path:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses the default path

        Returns:
            Path written
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        return config_path

    def to_dict(self) -> dict:
        return {
            "nutrition": {
                "activity_multipliers": dict(self.nutrition.activity_multipliers),
                "goal_adjustments": dict(self.nutrition.goal_adjustments),
                "fat_percentages": dict(self.nutrition.fat_percentages),
                "protein_grams_per_kg": self.nutrition.protein_grams_per_kg,
                "weekly_change_kg": self.nutrition.weekly_change_kg,
                "strict_activity_level": self.nutrition.strict_activity_level,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
            },
        }


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
