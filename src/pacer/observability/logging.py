"""Log output for the ``pacer`` logger hierarchy.

Library modules only create stdlib loggers (``pacer.retry``,
``pacer.retry.parse``) and never install handlers. Applications that want
to see backoff decisions call `configure_logging` once at startup:

    >>> from pacer.observability import configure_logging
    >>> configure_logging("DEBUG", "text")
    # => 10:30:45.120 [debug] pacer.retry: attempt 2: waiting 0.100s

    >>> configure_logging(format="json")  # JSON lines for log aggregation

Level and format default to LoggingSettings (PACER_LOG_LEVEL, PACER_LOG_FORMAT).
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from pacer.foundation.config import get_settings

ROOT_LOGGER = "pacer"

# Attributes every LogRecord has; anything else came in through `extra=`
_RESERVED: frozenset[str] = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def _extra(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED and not k.startswith("_")}


class ConsoleFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] logger: message key=value ..."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        parts = [ts, f"[{record.levelname.lower()}]", f"{record.name}: {record.getMessage()}"]
        parts += [f"{k}={v}" for k, v in sorted(_extra(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation (Elasticsearch, Loki, Datadog, etc.)."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extra(record),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    level: str | None = None,
    format: str | None = None,  # noqa: A002 - shadows builtin but matches settings
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install a single handler on the ``pacer`` logger. Format: "text" or "json"."""
    settings = get_settings().logging
    level = (level or settings.level).upper()
    match format or settings.format:
        case "text": formatter: logging.Formatter = ConsoleFormatter()
        case "json": formatter = JsonFormatter()
        case other: raise ValueError(f"Unknown format: {other}. Use 'text' or 'json'")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root = logging.getLogger(ROOT_LOGGER)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.WARNING))
    return handler
