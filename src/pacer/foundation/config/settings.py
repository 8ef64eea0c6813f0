"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from pacer.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.strategy.parsed.max_attempts
    5
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # PACER_STRATEGY_DEFAULT="delay=250ms maxduration=1m regular=true"
    # PACER_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pacer.retry import StrategyConfig, parse_strategy

DEFAULT_STRATEGY = "delay=100ms maxdelay=30s factor=2 maxcount=5"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PACER_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        """Accept level names in any case."""
        return v.strip().upper() if isinstance(v, str) else v


class StrategySettings(BaseSettings):
    """Default backoff strategy, in the textual key=value form."""

    model_config = SettingsConfigDict(
        env_prefix="PACER_STRATEGY_",
        extra="ignore",
    )

    default: str = Field(default=DEFAULT_STRATEGY, description="Textual strategy used when callers supply none")

    @field_validator("default")
    @classmethod
    def _check_parses(cls, v: str) -> str:
        """Reject strategies the parser would refuse, at load time."""
        parse_strategy(v)
        return v

    @computed_field
    @property
    def parsed(self) -> StrategyConfig:
        """Parsed form of `default`."""
        return parse_strategy(self.default)


class PacerSettings(BaseSettings):
    """Root settings for pacer.

    Loads configuration from environment variables with PACER_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        PACER_LOG_LEVEL=DEBUG
        PACER_LOG_FORMAT=json
        PACER_STRATEGY_DEFAULT="delay=1s maxcount=3"
    """

    model_config = SettingsConfigDict(
        env_prefix="PACER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    strategy: StrategySettings = Field(default_factory=StrategySettings)


@lru_cache(maxsize=1)
def get_settings() -> PacerSettings:
    """Get the global settings instance (cached)."""
    return PacerSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()


def default_strategy() -> StrategyConfig:
    """The configured default StrategyConfig."""
    return get_settings().strategy.parsed
