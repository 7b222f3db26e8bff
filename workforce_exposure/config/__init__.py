"""Configuration management for Workforce Exposure."""

from workforce_exposure.config.settings import (
    Settings,
    get_settings,
    load_settings_from_env,
    setup_logging,
)

__all__ = [
    "Settings",
    "get_settings",
    "load_settings_from_env",
    "setup_logging",
]
