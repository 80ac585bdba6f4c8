"""Prometheus metrics for CDN purges.

Provides:
- Outbound purge request count by provider and outcome
- Purged key count by provider
- Purge request latency by provider

Metrics are created on first use. With ``ENABLE_METRICS=false`` every
metric is a no-op and the exposition endpoint reports them as disabled.

Usage:
    from cdnpurge.observability.metrics import get_metrics

    with get_metrics().track_request("fastly", key_count=len(batch)):
        resp = await http.post(...)
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from cdnpurge.config import settings

logger = logging.getLogger(__name__)

LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

# attribute -> (type, name, description, labels)
METRIC_DEFINITIONS: dict[str, tuple[str, str, str, tuple[str, ...]]] = {
    "purge_requests_total": (
        "counter",
        "cdnpurge_requests_total",
        "Outbound CDN purge requests",
        ("provider", "outcome"),
    ),
    "purge_keys_total": (
        "counter",
        "cdnpurge_keys_total",
        "Cache keys accepted by CDN providers",
        ("provider",),
    ),
    "purge_request_duration_seconds": (
        "histogram",
        "cdnpurge_request_duration_seconds",
        "CDN purge request latency in seconds",
        ("provider",),
    ),
}


class NoOpMetric:
    """Stands in for any labelled metric when metrics are disabled."""

    def labels(self, **kwargs: Any) -> NoOpMetric:
        return self

    def inc(self, amount: float = 1) -> None:
        pass

    def observe(self, value: float) -> None:
        pass


@dataclass
class MetricsRegistry:
    """Purge metrics, backed by the default Prometheus registry once initialized."""

    purge_requests_total: Any = field(default_factory=NoOpMetric)
    purge_keys_total: Any = field(default_factory=NoOpMetric)
    purge_request_duration_seconds: Any = field(default_factory=NoOpMetric)

    _initialized: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    def initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            return

        from prometheus_client import REGISTRY, Counter, Histogram

        for attr, (kind, name, description, labels) in METRIC_DEFINITIONS.items():
            if kind == "histogram":
                metric = Histogram(name, description, labels, buckets=LATENCY_BUCKETS)
            else:
                metric = Counter(name, description, labels)
            setattr(self, attr, metric)

        self._registry = REGISTRY
        logger.info(f"Prometheus metrics initialized: {', '.join(METRIC_DEFINITIONS)}")

    def generate_latest(self) -> bytes:
        """Render the exposition format, or a comment when metrics are off."""
        if self._registry is None:
            return b"# Metrics disabled\n"

        from prometheus_client import generate_latest

        return generate_latest(self._registry)

    @contextmanager
    def track_request(self, provider: str, key_count: int) -> Iterator[None]:
        """Record outcome, latency and key count of one outbound purge call."""
        started = time.perf_counter()
        outcome = "error"
        try:
            yield
            outcome = "success"
            self.purge_keys_total.labels(provider=provider).inc(key_count)
        finally:
            self.purge_requests_total.labels(provider=provider, outcome=outcome).inc()
            self.purge_request_duration_seconds.labels(provider=provider).observe(
                time.perf_counter() - started
            )


metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Return the process-wide registry, initializing it on first access."""
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry
