"""Tests for the textual strategy parser and duration literals."""

from __future__ import annotations

import pytest

from pacer.foundation.errors import ErrorCode, StrategyParseError
from pacer.retry import StrategyConfig, StrategyParser, format_duration, parse_duration, parse_duration_ns, parse_strategy


# ─────────────────────────────────────────────────────────────────────────────
# Valid Input
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("text", "want"),
    [
        pytest.param(
            "delay=100ms maxdelay=1s factor=2.0",
            StrategyConfig(initial_delay=0.1, max_delay=1.0, growth_factor=2.0),
            id="basic exponential",
        ),
        pytest.param(
            "delay=100ms maxdelay=1s",
            StrategyConfig(initial_delay=0.1, max_delay=1.0),
            id="default factor",
        ),
        pytest.param(
            "delay=100us maxdelay=1ms factor=1.5",
            StrategyConfig(initial_delay=1e-4, max_delay=0.001, growth_factor=1.5),
            id="microsecond delay",
        ),
        pytest.param(
            "delay=1m maxdelay=1h factor=2.0",
            StrategyConfig(initial_delay=60.0, max_delay=3600.0, growth_factor=2.0),
            id="minute delay",
        ),
        pytest.param(
            "delay=100ms maxdelay=1s factor=2.0 maxcount=5",
            StrategyConfig(initial_delay=0.1, max_delay=1.0, growth_factor=2.0, max_attempts=5),
            id="with max count",
        ),
        pytest.param(
            "delay=100ms maxdelay=1s factor=2.0 maxduration=5s",
            StrategyConfig(initial_delay=0.1, max_delay=1.0, growth_factor=2.0, max_total_duration=5.0),
            id="with max duration",
        ),
        pytest.param(
            "delay=100ms maxdelay=1s regular=true",
            StrategyConfig(initial_delay=0.1, max_delay=1.0, regular=True),
            id="regular mode",
        ),
        pytest.param(
            "delay=100ms maxdelay=1s factor=2.0 maxcount=5 maxduration=5s regular=true",
            StrategyConfig(
                initial_delay=0.1, max_delay=1.0, growth_factor=2.0,
                max_attempts=5, max_total_duration=5.0, regular=True,
            ),
            id="all parameters",
        ),
        pytest.param(
            "delay=100ms maxcount=0",
            StrategyConfig(initial_delay=0.1, max_attempts=0),
            id="zero maxcount",
        ),
        pytest.param(
            "delay=1ns maxdelay=1ms",
            StrategyConfig(initial_delay=1e-9, max_delay=0.001),
            id="very small delay",
        ),
        pytest.param(
            "delay=1h maxdelay=24h",
            StrategyConfig(initial_delay=3600.0, max_delay=86400.0),
            id="very large delay",
        ),
        pytest.param(
            "delay=-100ms",
            StrategyConfig(initial_delay=-0.1),
            id="negative delay",
        ),
        pytest.param(
            "  delay=1s\tregular=off  ",
            StrategyConfig(initial_delay=1.0),
            id="extra whitespace",
        ),
    ],
)
def test_parse_valid(text: str, want: StrategyConfig) -> None:
    assert parse_strategy(text) == want


def test_parse_basic_fields() -> None:
    """Unset fields keep their zero values."""
    cfg = parse_strategy("delay=100ms maxdelay=1s factor=2.0")

    assert cfg.initial_delay == 0.1
    assert cfg.max_delay == 1.0
    assert cfg.growth_factor == 2.0
    assert cfg.max_attempts is None
    assert cfg.max_total_duration == 0.0
    assert cfg.regular is False


def test_maxcount_absent_vs_zero() -> None:
    """Absent maxcount is unbounded; maxcount=0 is an explicit zero."""
    assert parse_strategy("delay=1s").max_attempts is None
    assert parse_strategy("delay=1s maxcount=0").max_attempts == 0


@pytest.mark.parametrize("literal", ["true", "TRUE", "t", "1", "yes", "y", "on"])
def test_regular_true_aliases(literal: str) -> None:
    assert parse_strategy(f"delay=1s regular={literal}").regular is True


@pytest.mark.parametrize("literal", ["false", "False", "f", "0", "no", "n", "off"])
def test_regular_false_aliases(literal: str) -> None:
    assert parse_strategy(f"delay=1s regular={literal}").regular is False


def test_repeated_key_last_wins() -> None:
    assert parse_strategy("delay=1s delay=2s").initial_delay == 2.0


def test_from_text_classmethod() -> None:
    assert StrategyConfig.from_text("delay=5ms maxcount=2") == StrategyConfig(initial_delay=0.005, max_attempts=2)


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("text", "field", "code", "needle"),
    [
        pytest.param("delay=invalid", "delay", ErrorCode.MALFORMED_DURATION, "invalid duration", id="invalid duration"),
        pytest.param("delay=100ms factor=invalid", "factor", ErrorCode.MALFORMED_NUMBER, "factor", id="invalid factor"),
        pytest.param("delay=100ms maxcount=invalid", "maxcount", ErrorCode.MALFORMED_INTEGER, "maxcount", id="invalid maxcount"),
        pytest.param("maxdelay=1s", "delay", ErrorCode.MISSING_REQUIRED_FIELD, "delay", id="missing delay"),
        pytest.param("delay=100ms regular=notbool", "regular", ErrorCode.MALFORMED_BOOLEAN, "regular", id="invalid regular"),
        pytest.param("delay=100ms maxdelay=soon", "maxdelay", ErrorCode.MALFORMED_DURATION, "maxdelay", id="invalid maxdelay"),
        pytest.param("delay=100ms maxduration=5", "maxduration", ErrorCode.MALFORMED_DURATION, "maxduration", id="unitless maxduration"),
        pytest.param("delay=100ms maxduration=-1s", "maxduration", ErrorCode.MALFORMED_DURATION, "maxduration", id="negative maxduration"),
        pytest.param("delay=100ms maxcount=-1", "maxcount", ErrorCode.MALFORMED_INTEGER, "maxcount", id="negative maxcount"),
        pytest.param("delay=100ms maxcount=2.5", "maxcount", ErrorCode.MALFORMED_INTEGER, "maxcount", id="fractional maxcount"),
        pytest.param("delay=100ms factor=-2", "factor", ErrorCode.MALFORMED_NUMBER, "factor", id="negative factor"),
        pytest.param("delay=100ms factor=nan", "factor", ErrorCode.MALFORMED_NUMBER, "factor", id="nan factor"),
        pytest.param("delay=100ms factor=inf", "factor", ErrorCode.MALFORMED_NUMBER, "factor", id="infinite factor"),
        pytest.param("delay=100ms jitter=true", "jitter", ErrorCode.UNKNOWN_FIELD, "jitter", id="unknown key"),
        pytest.param("delay=100ms regular", "regular", ErrorCode.MALFORMED_TOKEN, "regular", id="token without value"),
        pytest.param("delay=1s =5", "=5", ErrorCode.MALFORMED_TOKEN, "=5", id="empty key"),
        pytest.param("delay=1s =", "=", ErrorCode.MALFORMED_TOKEN, "expected key=value", id="bare equals"),
        pytest.param("", "delay", ErrorCode.MISSING_REQUIRED_FIELD, "delay", id="empty input"),
    ],
)
def test_parse_errors(text: str, field: str, code: ErrorCode, needle: str) -> None:
    with pytest.raises(StrategyParseError) as info:
        parse_strategy(text)

    exc = info.value
    assert exc.field == field
    assert exc.code == code
    assert needle in str(exc)


def test_first_failure_wins() -> None:
    with pytest.raises(StrategyParseError) as info:
        parse_strategy("delay=100ms factor=x maxcount=y")
    assert info.value.field == "factor"


def test_error_is_value_error_with_structured_detail() -> None:
    with pytest.raises(ValueError) as info:
        parse_strategy("delay=100ms regular=notbool")

    error = info.value.error  # type: ignore[attr-defined]
    assert error.value == "notbool"
    assert not error.is_missing
    assert error.model_dump()["code"] == "MALFORMED_BOOLEAN"


def test_missing_field_flagged() -> None:
    with pytest.raises(StrategyParseError) as info:
        parse_strategy("maxdelay=1s")
    assert info.value.error.is_missing
    assert info.value.error.value is None


def test_parser_keys() -> None:
    assert StrategyParser().keys == ("delay", "maxdelay", "factor", "maxcount", "maxduration", "regular")


# ─────────────────────────────────────────────────────────────────────────────
# Duration Literals
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("literal", "nanos"),
    [
        ("0", 0),
        ("-0", 0),
        ("1ns", 1),
        ("100us", 100_000),
        ("100µs", 100_000),
        ("100μs", 100_000),
        ("100ms", 100_000_000),
        ("1.5s", 1_500_000_000),
        (".5s", 500_000_000),
        ("1.s", 1_000_000_000),
        ("1h30m", 5_400_000_000_000),
        ("2m3.5s", 123_500_000_000),
        ("+10ms", 10_000_000),
        ("-100ms", -100_000_000),
        ("1.0000000001s", 1_000_000_000),
    ],
)
def test_parse_duration_ns(literal: str, nanos: int) -> None:
    assert parse_duration_ns(literal) == nanos


@pytest.mark.parametrize("literal", ["", "-", "5", "1x", "ms", ".s", "1 s", "1s2", "9999999999999h"])
def test_parse_duration_rejects(literal: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(literal)


def test_parse_duration_seconds() -> None:
    assert parse_duration("100ms") == 0.1
    assert parse_duration("1ns") == 1e-9


@pytest.mark.parametrize(
    ("seconds", "literal"),
    [(0.0, "0s"), (0.1, "100ms"), (1.0, "1s"), (5400.0, "90m"), (7200.0, "2h"), (1e-9, "1ns"), (-0.25, "-250ms"), (1.5e-6, "1500ns")],
)
def test_format_duration(seconds: float, literal: str) -> None:
    assert format_duration(seconds) == literal
