"""Observability for cdnpurge: structured logging and Prometheus metrics."""

from cdnpurge.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    configure_logging,
)
from cdnpurge.observability.metrics import MetricsRegistry, get_metrics

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "LogContext",
    "configure_logging",
    "MetricsRegistry",
    "get_metrics",
]
