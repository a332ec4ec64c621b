"""Configuration loading."""

from nutritrack.config.settings import (
    ConfigError,
    Settings,
    default_config_path,
    get_settings,
    reload_settings,
)

__all__ = [
    "ConfigError",
    "Settings",
    "default_config_path",
    "get_settings",
    "reload_settings",
]
