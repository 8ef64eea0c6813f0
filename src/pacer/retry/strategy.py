"""Immutable backoff strategy description.

StrategyConfig is the static half of the engine: a frozen value describing
how retries are spaced. Many iterators may share one config since nothing
ever mutates it; `replace()` returns a new value instead.

Durations are float seconds. Duration fields also accept `timedelta`
objects and duration literals such as ``"100ms"``.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, computed_field, field_validator

from .backoff import AsyncBackoffIterator, BackoffIterator
from .duration import NS_PER_S, format_duration, parse_duration

if TYPE_CHECKING:
    from .backoff import Clock


class StrategyConfig(BaseModel):
    """Declarative backoff policy.

    Attributes:
        initial_delay: Delay before the first retry; may be zero or negative
        max_delay: Upper clamp on the growing delay (<= 0 = unbounded)
        growth_factor: Multiplier applied after each wait (<= 1 = no growth)
        max_attempts: Cap on total attempts, including the first (None = unbounded)
        max_total_duration: Cap on elapsed time, in seconds (0 = unbounded)
        regular: Fixed-interval mode, the delay never grows

    Example:
        >>> cfg = StrategyConfig(initial_delay=0.1, max_delay=1.0, growth_factor=2.0)
        >>> str(cfg)
        'delay=100ms maxdelay=1s factor=2.0'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        revalidate_instances="never",
        json_schema_extra={
            "title": "Backoff Strategy",
            "description": "Static description of retry spacing",
            "examples": [{
                "initial_delay": 0.1,
                "max_delay": 1.0,
                "growth_factor": 2.0,
                "max_attempts": 5,
            }],
        },
    )

    initial_delay: float
    max_delay: float = 0.0
    growth_factor: NonNegativeFloat = 0.0
    max_attempts: Annotated[int, Field(ge=0)] | None = None
    max_total_duration: NonNegativeFloat = 0.0
    regular: bool = False

    @field_validator("initial_delay", "max_delay", "max_total_duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: float | timedelta | str) -> float:
        """Accept timedelta objects and duration literals."""
        if isinstance(v, timedelta):
            return v.total_seconds()
        if isinstance(v, str):
            return parse_duration(v.strip())
        return v

    @field_validator("initial_delay", "max_delay", "max_total_duration")
    @classmethod
    def _whole_nanoseconds(cls, v: float) -> float:
        """Round durations to the nanosecond grid the textual form can express."""
        return round(v * NS_PER_S) / NS_PER_S if math.isfinite(v) else v

    @classmethod
    def from_text(cls, text: str) -> StrategyConfig:
        """Parse the textual ``key=value`` form. See `parse_strategy`."""
        from .parse import parse_strategy
        return parse_strategy(text)

    @computed_field
    @property
    def is_bounded(self) -> bool:
        """Whether an attempt or total-duration cap will end the run on its own."""
        return self.max_attempts is not None or self.max_total_duration > 0

    def replace(self, **changes: object) -> StrategyConfig:
        """Return a copy with `changes` applied (validated)."""
        return type(self)(**{**{name: getattr(self, name) for name in type(self).model_fields}, **changes})

    def start(self, clock: Clock | None = None) -> BackoffIterator:
        return BackoffIterator.start(self, clock)

    def astart(self, clock: Clock | None = None) -> AsyncBackoffIterator:
        return AsyncBackoffIterator.start(self, clock)

    def format(self) -> str:
        """Render the canonical textual form accepted by the parser.

        Any config with finite durations parses back to an equal value.
        """
        parts = [f"delay={format_duration(self.initial_delay)}"]
        if self.max_delay:
            parts.append(f"maxdelay={format_duration(self.max_delay)}")
        if self.growth_factor:
            parts.append(f"factor={self.growth_factor!r}")
        if self.max_attempts is not None:
            parts.append(f"maxcount={self.max_attempts}")
        if self.max_total_duration:
            parts.append(f"maxduration={format_duration(self.max_total_duration)}")
        if self.regular:
            parts.append("regular=true")
        return " ".join(parts)

    __str__ = format
