"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    DEFAULT_STRATEGY,
    LoggingSettings,
    PacerSettings,
    StrategySettings,
    clear_settings_cache,
    default_strategy,
    get_settings,
)

__all__ = [
    "DEFAULT_STRATEGY",
    "LoggingSettings",
    "PacerSettings",
    "StrategySettings",
    "clear_settings_cache",
    "default_strategy",
    "get_settings",
]
