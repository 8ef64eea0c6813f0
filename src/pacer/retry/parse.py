"""Textual strategy parser.

Turns a compact, whitespace-separated ``key=value`` string into a
StrategyConfig:

    delay=100ms maxdelay=1s factor=2.0 maxcount=5 maxduration=30s regular=false

Keys:
    delay        required, duration literal (may be negative)
    maxdelay     duration literal
    factor       non-negative float
    maxcount     non-negative integer; absent = unbounded, 0 = no retries
    maxduration  non-negative duration literal
    regular      boolean (true/false, yes/no, on/off, 1/0, t/f, y/n)

Unknown keys and tokens without a ``key=`` prefix are rejected. A repeated key takes
its last value. Every failure raises StrategyParseError naming the key.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ValidationError

from pacer.foundation.errors import ErrorCode, StrategyParseError

from .duration import parse_duration
from .strategy import StrategyConfig

logger = logging.getLogger("pacer.retry.parse")

_TRUE: frozenset[str] = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE: frozenset[str] = frozenset({"0", "f", "false", "n", "no", "off"})


def _decode_factor(raw: str) -> float:
    v = float(raw)
    if not math.isfinite(v) or v < 0:
        raise ValueError("factor must be finite and non-negative")
    return v


def _decode_count(raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()):
        raise ValueError("expected a non-negative decimal integer")
    return int(raw)


def _decode_bool(raw: str) -> bool:
    if (v := raw.lower()) in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError("expected a boolean literal")


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """How one textual key maps onto a StrategyConfig attribute."""
    key: str
    attr: str
    code: ErrorCode
    decode: Callable[[str], object]


DEFAULT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("delay", "initial_delay", ErrorCode.MALFORMED_DURATION, parse_duration),
    FieldSpec("maxdelay", "max_delay", ErrorCode.MALFORMED_DURATION, parse_duration),
    FieldSpec("factor", "growth_factor", ErrorCode.MALFORMED_NUMBER, _decode_factor),
    FieldSpec("maxcount", "max_attempts", ErrorCode.MALFORMED_INTEGER, _decode_count),
    FieldSpec("maxduration", "max_total_duration", ErrorCode.MALFORMED_DURATION, parse_duration),
    FieldSpec("regular", "regular", ErrorCode.MALFORMED_BOOLEAN, _decode_bool),
)

_REQUIRED = "delay"


class StrategyParser:
    """Parser for the textual strategy format.

    Holds the key table so alternative key sets can be plugged in; most
    callers want `parse_strategy`.
    """

    __slots__ = ("_by_key", "_by_attr")

    def __init__(self, fields: tuple[FieldSpec, ...] = DEFAULT_FIELDS) -> None:
        self._by_key = {f.key: f for f in fields}
        self._by_attr = {f.attr: f for f in fields}

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self._by_key)

    def parse(self, text: str) -> StrategyConfig:
        """Parse `text` into a StrategyConfig.

        Raises:
            StrategyParseError: On the first malformed, unknown or missing field
        """
        raw: dict[str, str] = {}
        values: dict[str, object] = {}
        for token in text.split():
            key, sep, value = token.partition("=")
            if not (sep and key):
                raise _fail(token, ErrorCode.MALFORMED_TOKEN)
            if (entry := self._by_key.get(key)) is None:
                raise _fail(key, ErrorCode.UNKNOWN_FIELD, value)
            try:
                values[entry.attr] = entry.decode(value)
            except ValueError as e:
                raise _fail(key, entry.code, value) from e
            raw[key] = value

        if _REQUIRED not in raw:
            raise _fail(_REQUIRED, ErrorCode.MISSING_REQUIRED_FIELD)

        try:
            return StrategyConfig(**values)
        except ValidationError as e:
            err = e.errors()[0]
            entry = self._by_attr[str(err["loc"][0])]
            raise _fail(entry.key, entry.code, raw[entry.key], reason=err["msg"]) from e


def _fail(field: str, code: ErrorCode, value: str | None = None, *, reason: str = "") -> StrategyParseError:
    exc = StrategyParseError.create(field, code, value, reason=reason)
    logger.debug("strategy parse failed: %s", exc.error.message)
    return exc


_default_parser = StrategyParser()


def parse_strategy(text: str) -> StrategyConfig:
    """Parse a textual strategy with the standard keys.

    Example:
        >>> parse_strategy("delay=100ms maxdelay=1s factor=2.0")
        StrategyConfig(initial_delay=0.1, max_delay=1.0, growth_factor=2.0, ...)

    Raises:
        StrategyParseError: Naming the offending field
    """
    return _default_parser.parse(text)
