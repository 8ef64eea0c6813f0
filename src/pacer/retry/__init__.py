"""Retry/backoff strategy engine.

A StrategyConfig describes how retries are spaced; a BackoffIterator (or
AsyncBackoffIterator) turns it into a live, cancellable run that the
caller drives around its own retry loop.

Example:
    >>> from pacer.retry import parse_strategy, attempts
    >>> cfg = parse_strategy("delay=100ms maxdelay=2s factor=2 maxcount=5")
    >>> for attempt in attempts(cfg, stop_event):
    ...     if fetch():
    ...         break
"""

from .backoff import (
    AsyncBackoffIterator,
    BackoffIterator,
    Clock,
    IteratorState,
    async_attempts,
    attempts,
)
from .duration import format_duration, parse_duration, parse_duration_ns
from .parse import DEFAULT_FIELDS, FieldSpec, StrategyParser, parse_strategy
from .strategy import StrategyConfig

__all__ = [
    # Strategy
    "StrategyConfig",
    # Parsing
    "StrategyParser",
    "FieldSpec",
    "DEFAULT_FIELDS",
    "parse_strategy",
    "parse_duration",
    "parse_duration_ns",
    "format_duration",
    # Iteration
    "BackoffIterator",
    "AsyncBackoffIterator",
    "IteratorState",
    "Clock",
    "attempts",
    "async_attempts",
]
