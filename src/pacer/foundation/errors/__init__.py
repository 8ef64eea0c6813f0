"""Error handling for pacer.

- ErrorCode: Standard codes for strategy parse failures
- StrategyError: Structured, field-identifying error model
- StrategyParseError: Exception raised by the strategy parser
"""

from .errors import ErrorCode, StrategyError, StrategyParseError

__all__ = ["ErrorCode", "StrategyError", "StrategyParseError"]
