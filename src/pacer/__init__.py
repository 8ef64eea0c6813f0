"""pacer - Retry/backoff strategy engine.

Describe how retries should be spaced, once, and drive any fallible
operation with it. pacer never runs the operation and never decides which
errors are retryable; it only answers "wait, then try again?" or "stop".

Quick Start:
    >>> from pacer import parse_strategy
    >>>
    >>> strategy = parse_strategy("delay=100ms maxdelay=2s factor=2 maxcount=5")
    >>> it = strategy.start()
    >>> while not connect():
    ...     if not it.next(stop_event):
    ...         break

Programmatic Strategies:
    >>> from pacer import StrategyConfig
    >>> polling = StrategyConfig(initial_delay=0.25, max_total_duration=10.0, regular=True)
    >>> for attempt in polling.start():
    ...     if ready():
    ...         break

Asyncio:
    >>> async for attempt in strategy.astart().iterate(stop):
    ...     if await connect():
    ...         break

Configuration (environment):
    PACER_STRATEGY_DEFAULT="delay=1s maxcount=3"  -> default_strategy()
    PACER_LOG_LEVEL=DEBUG, PACER_LOG_FORMAT=json  -> configure_logging()
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import ErrorCode, StrategyError, StrategyParseError

# Engine
from .retry import (
    AsyncBackoffIterator,
    BackoffIterator,
    IteratorState,
    StrategyConfig,
    StrategyParser,
    async_attempts,
    attempts,
    format_duration,
    parse_duration,
    parse_strategy,
)

# Configuration
from .foundation.config import PacerSettings, clear_settings_cache, default_strategy, get_settings

# Observability
from .observability import configure_logging

__all__ = [
    "__version__",
    # Errors
    "ErrorCode",
    "StrategyError",
    "StrategyParseError",
    # Strategy
    "StrategyConfig",
    "StrategyParser",
    "parse_strategy",
    "parse_duration",
    "format_duration",
    # Iteration
    "BackoffIterator",
    "AsyncBackoffIterator",
    "IteratorState",
    "attempts",
    "async_attempts",
    # Configuration
    "PacerSettings",
    "get_settings",
    "clear_settings_cache",
    "default_strategy",
    # Observability
    "configure_logging",
]
