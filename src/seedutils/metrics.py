"""
Prometheus metrics for fixture loading.

Metrics are registered once per process on the default registry. Callers
that want isolated numbers (tests, embedding applications) can build a
FixtureMetrics on their own CollectorRegistry.
"""

import logging
from typing import Callable, TypeVar

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_or_create_metric(
    metric_factory: Callable[[], T],
    metric_name: str,
    registry: CollectorRegistry = REGISTRY,
) -> T:
    """
    Create a metric, or return the one already registered under that name.

    Args:
        metric_factory: Callable that creates the metric
        metric_name: Registered name used for lookup on collision
        registry: Registry the factory registers with

    Returns:
        The new or existing metric
    """
    try:
        return metric_factory()
    except ValueError:
        existing = registry._names_to_collectors.get(metric_name)
        if existing is not None:
            return existing
        raise


class FixtureMetrics:
    """Counters and timings for fixture loads."""

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Args:
            registry: Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.rows_loaded_total = get_or_create_metric(
            lambda: Counter(
                "fixture_rows_loaded_total",
                "Fixture rows written, by table and operation",
                ["table", "operation"],
                registry=self.registry,
            ),
            "fixture_rows_loaded_total",
            self.registry,
        )

        self.load_failures_total = get_or_create_metric(
            lambda: Counter(
                "fixture_load_failures_total",
                "Fixture loads aborted, by failing stage",
                ["stage"],
                registry=self.registry,
            ),
            "fixture_load_failures_total",
            self.registry,
        )

        self.sequence_corrections_total = get_or_create_metric(
            lambda: Counter(
                "fixture_sequence_corrections_total",
                "Sequences realigned after explicit primary key writes",
                ["table"],
                registry=self.registry,
            ),
            "fixture_sequence_corrections_total",
            self.registry,
        )

        self.load_duration_seconds = get_or_create_metric(
            lambda: Histogram(
                "fixture_load_duration_seconds",
                "Duration of a fixture load call",
                ["transaction_mode"],
                buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60),
                registry=self.registry,
            ),
            "fixture_load_duration_seconds",
            self.registry,
        )

    def record_row(self, table: str, operation: str) -> None:
        self.rows_loaded_total.labels(table=table, operation=operation).inc()

    def record_failure(self, stage: str) -> None:
        self.load_failures_total.labels(stage=stage).inc()

    def record_sequence_correction(self, table: str, count: int = 1) -> None:
        if count:
            self.sequence_corrections_total.labels(table=table).inc(count)

    def observe_duration(self, transaction_mode: str, seconds: float) -> None:
        self.load_duration_seconds.labels(transaction_mode=transaction_mode).observe(seconds)


_default_metrics: FixtureMetrics | None = None


def get_default_metrics() -> FixtureMetrics:
    """Return the process-wide FixtureMetrics bound to the global registry."""
    global _default_metrics
    if _default_metrics is None:
        _default_metrics = FixtureMetrics()
    return _default_metrics
