"""Structured errors for strategy parsing.

Provides error codes and a structured error model so callers can match on
the failing field without parsing messages. Uses Pydantic for validation
and serialization.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorCode(StrEnum):
    """Standard error codes for strategy parse failures."""
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    MALFORMED_DURATION = "MALFORMED_DURATION"
    MALFORMED_NUMBER = "MALFORMED_NUMBER"
    MALFORMED_INTEGER = "MALFORMED_INTEGER"
    MALFORMED_BOOLEAN = "MALFORMED_BOOLEAN"
    UNKNOWN_FIELD = "UNKNOWN_FIELD"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"


# Code -> message prefix; every message names the field it is about
_DESCRIPTIONS: dict[ErrorCode, str] = {
    ErrorCode.MISSING_REQUIRED_FIELD: "missing required field",
    ErrorCode.MALFORMED_DURATION: "invalid duration",
    ErrorCode.MALFORMED_NUMBER: "invalid number",
    ErrorCode.MALFORMED_INTEGER: "invalid integer",
    ErrorCode.MALFORMED_BOOLEAN: "invalid boolean",
    ErrorCode.UNKNOWN_FIELD: "unknown field",
    ErrorCode.MALFORMED_TOKEN: "malformed token",
}


class StrategyError(BaseModel):
    """Structured description of a strategy parse failure.

    Attributes:
        field: Key that failed (or the raw token for MALFORMED_TOKEN)
        code: Machine-readable error code
        message: Human-readable message, always naming the field
        value: Raw text of the rejected value, if there was one
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        extra="forbid",
        json_schema_extra={
            "title": "Strategy Error",
            "description": "Structured error from strategy parsing",
            "examples": [{
                "field": "delay",
                "code": "MALFORMED_DURATION",
                "message": 'invalid duration "soon" for field "delay"',
                "value": "soon",
            }],
        },
    )

    field: Annotated[str, Field(min_length=1, description="Offending key")]
    code: ErrorCode
    message: Annotated[str, Field(min_length=1)]
    value: str | None = None

    @computed_field
    @property
    def is_missing(self) -> bool:
        """Whether the error reports an absent field rather than a bad value."""
        return self.code == ErrorCode.MISSING_REQUIRED_FIELD

    @classmethod
    def create(cls, field: str, code: ErrorCode, value: str | None = None, *, reason: str = "") -> Self:
        """Factory building the standard message for a code."""
        head = _DESCRIPTIONS[code]
        if code in (ErrorCode.MISSING_REQUIRED_FIELD, ErrorCode.UNKNOWN_FIELD):
            message = f'{head} "{field}"'
        elif code == ErrorCode.MALFORMED_TOKEN:
            message = f'{head} "{field}" (expected key=value)'
        else:
            message = f'{head} "{value}" for field "{field}"'
        if reason:
            message = f"{message}: {reason}"
        return cls(field=field, code=code, message=message, value=value)

    def render(self) -> str:
        return self.message

    __str__ = render


class StrategyParseError(ValueError):
    """Exception wrapping a StrategyError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: StrategyError) -> None:
        self.error = error
        super().__init__(error.message)

    @classmethod
    def create(cls, field: str, code: ErrorCode, value: str | None = None, *, reason: str = "") -> Self:
        return cls(StrategyError.create(field, code, value, reason=reason))

    @property
    def field(self) -> str:
        return self.error.field

    @property
    def code(self) -> ErrorCode:
        return self.error.code
