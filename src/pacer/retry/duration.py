"""Duration literals for textual strategies.

Literals are a signed sequence of decimal numbers, each with a unit suffix:
``100ms``, ``1h30m``, ``1.5s``, ``-250us``. A bare ``0`` is also accepted.
Values are decoded to integer nanoseconds first so that ``1ns`` or ``100ms``
map to exactly the float seconds you would write by hand.
"""

from __future__ import annotations

import re

NS_PER_S = 1_000_000_000

_UNITS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": NS_PER_S,
    "m": 60 * NS_PER_S,
    "h": 3600 * NS_PER_S,
}

# "ms" must precede "m" in the alternation
_COMPONENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?(ns|us|µs|μs|ms|s|m|h)")

# Largest unit first, for formatting
_FORMAT_UNITS: tuple[tuple[str, int], ...] = (
    ("h", _UNITS["h"]), ("m", _UNITS["m"]), ("s", _UNITS["s"]),
    ("ms", _UNITS["ms"]), ("us", _UNITS["us"]),
)

_MAX_NANOS = 2**63 - 1


def parse_duration_ns(text: str) -> int:
    """Parse a duration literal into integer nanoseconds.

    Fractional parts below one nanosecond are truncated.

    Raises:
        ValueError: If the literal is empty, lacks a unit, or overflows
    """
    s = text
    sign = 1
    if s[:1] in ("-", "+"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s == "0":
        return 0
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = pos = 0
    while pos < len(s):
        m = _COMPONENT.match(s, pos)
        if m is None or (not m[1] and not m[2]):
            raise ValueError(f"invalid duration {text!r}")
        whole, frac, unit = m.groups()
        scale = _UNITS[unit]
        total += int(whole or 0) * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        if total > _MAX_NANOS:
            raise ValueError(f"invalid duration {text!r}: out of range")
        pos = m.end()
    return sign * total


def parse_duration(text: str) -> float:
    """Parse a duration literal into float seconds."""
    return parse_duration_ns(text) / NS_PER_S


def format_duration(seconds: float) -> str:
    """Render seconds as the shortest single-unit literal, e.g. ``0.1`` -> ``100ms``."""
    nanos = round(seconds * NS_PER_S)
    if nanos == 0:
        return "0s"
    sign, n = ("-" if nanos < 0 else ""), abs(nanos)
    for unit, scale in _FORMAT_UNITS:
        if n % scale == 0:
            return f"{sign}{n // scale}{unit}"
    return f"{sign}{n}ns"
