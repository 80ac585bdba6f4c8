"""Structured logging for purge operations.

Provides:
- JSON-formatted logs for log aggregation systems
- Request and site correlation via context variables
- A console formatter for local runs and the CLI

Usage:
    from cdnpurge.observability.logging import LogContext, configure_logging

    configure_logging(json_format=True, level="INFO")

    with LogContext(request_id="abc-123", site_id="org--site"):
        logger.info("Purging keys")  # Includes request_id and site_id
"""

from __future__ import annotations

import contextvars
import logging
import sys
from datetime import datetime, timezone
from typing import Any

import orjson

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
site_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("site_id", default="")

# Correlation fields attached to every record, by output name
CONTEXT_VARS: dict[str, contextvars.ContextVar[str]] = {
    "request_id": request_id_var,
    "site_id": site_id_var,
}

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def correlation_fields() -> dict[str, str]:
    """Return the non-empty correlation values of the current context."""
    return {name: value for name, var in CONTEXT_VARS.items() if (value := var.get())}


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Output format:
    {
        "timestamp": "2026-01-10T12:34:56.789000+00:00",
        "level": "INFO",
        "logger": "cdnpurge",
        "message": "org--site/us/en [1] [fastly] cdn.example.com purging keys ...",
        "request_id": "abc-123",
        "site_id": "org--site"
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(correlation_fields())
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return orjson.dumps(entry, default=str).decode()


class ConsoleFormatter(logging.Formatter):
    """Single-line human-readable output.

    Output format:
    12:34:56 WARNING  cdnpurge: No keys to purge, skipping purge [req=abc-123 site=org--site]
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def _level(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if not self.use_colors:
            return level
        return f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{clock} {self._level(record)} {record.name}: {record.getMessage()}"

        fields = correlation_fields()
        if fields:
            tags = []
            if "request_id" in fields:
                tags.append(f"req={fields['request_id'][:8]}")
            if "site_id" in fields:
                tags.append(f"site={fields['site_id']}")
            line += f" [{' '.join(tags)}]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    json_format: bool = True,
    level: str = "INFO",
    use_colors: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        json_format: Use JSON format (recommended for production)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_colors: Use ANSI colors in console format
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(use_colors))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    # Outbound purge calls are logged by the clients themselves
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


class LogContext:
    """Bind correlation fields for the duration of a block.

    Usage:
        with LogContext(request_id="123", site_id="org--site"):
            logger.info("Processing batch")
    """

    def __init__(self, **fields: str) -> None:
        unknown = set(fields) - set(CONTEXT_VARS)
        if unknown:
            raise TypeError(f"unknown log context fields: {sorted(unknown)}")
        self.fields = fields
        self._tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []

    def __enter__(self) -> "LogContext":
        for name, value in self.fields.items():
            var = CONTEXT_VARS[name]
            self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *args: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
