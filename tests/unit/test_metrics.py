"""
Unit tests for seedutils.metrics

Every test builds FixtureMetrics on its own CollectorRegistry so counts do
not leak between tests.
"""

from unittest.mock import Mock

import pytest
from prometheus_client import REGISTRY, CollectorRegistry, Counter

from seedutils.metrics import FixtureMetrics, get_default_metrics, get_or_create_metric


class TestGetOrCreateMetric:
    """Test idempotent metric registration"""

    def test_creates_new_metric(self):
        # Arrange
        registry = CollectorRegistry()

        # Act
        counter = get_or_create_metric(
            lambda: Counter("widgets_total", "Widgets", registry=registry),
            "widgets_total",
            registry,
        )

        # Assert
        assert isinstance(counter, Counter)

    def test_returns_existing_metric_on_collision(self):
        # Arrange
        registry = CollectorRegistry()
        factory = lambda: Counter("widgets_total", "Widgets", registry=registry)  # noqa: E731
        first = get_or_create_metric(factory, "widgets_total", registry)

        # Act
        second = get_or_create_metric(factory, "widgets_total", registry)

        # Assert
        assert second is first

    def test_unknown_name_reraises(self):
        factory = Mock(side_effect=ValueError("bad metric"))

        with pytest.raises(ValueError, match="bad metric"):
            get_or_create_metric(factory, "not_registered", CollectorRegistry())


class TestFixtureMetrics:
    """Test FixtureMetrics class"""

    def setup_method(self):
        self.registry = CollectorRegistry()
        self.metrics = FixtureMetrics(registry=self.registry)

    def test_init_creates_all_metrics(self):
        assert self.metrics.rows_loaded_total is not None
        assert self.metrics.load_failures_total is not None
        assert self.metrics.sequence_corrections_total is not None
        assert self.metrics.load_duration_seconds is not None

    def test_second_instance_shares_collectors(self):
        # Arrange & Act
        other = FixtureMetrics(registry=self.registry)

        # Assert
        assert other.rows_loaded_total is self.metrics.rows_loaded_total

    def test_record_row(self):
        # Act
        self.metrics.record_row("users", "insert")
        self.metrics.record_row("users", "insert")
        self.metrics.record_row("users", "update")

        # Assert
        assert self.registry.get_sample_value(
            "fixture_rows_loaded_total", {"table": "users", "operation": "insert"}
        ) == 2.0
        assert self.registry.get_sample_value(
            "fixture_rows_loaded_total", {"table": "users", "operation": "update"}
        ) == 1.0

    def test_record_failure(self):
        self.metrics.record_failure("commit")

        assert self.registry.get_sample_value(
            "fixture_load_failures_total", {"stage": "commit"}
        ) == 1.0

    def test_record_sequence_correction(self):
        self.metrics.record_sequence_correction("users", 2)

        assert self.registry.get_sample_value(
            "fixture_sequence_corrections_total", {"table": "users"}
        ) == 2.0

    def test_zero_sequence_corrections_not_recorded(self):
        self.metrics.record_sequence_correction("users", 0)

        assert self.registry.get_sample_value(
            "fixture_sequence_corrections_total", {"table": "users"}
        ) is None

    def test_observe_duration(self):
        self.metrics.observe_duration("per-row-transaction", 0.2)

        labels = {"transaction_mode": "per-row-transaction"}
        assert self.registry.get_sample_value("fixture_load_duration_seconds_count", labels) == 1.0
        assert self.registry.get_sample_value("fixture_load_duration_seconds_sum", labels) == 0.2


class TestDefaultMetrics:
    """Test the process-wide instance"""

    def test_default_metrics_is_singleton(self):
        assert get_default_metrics() is get_default_metrics()

    def test_default_metrics_uses_global_registry(self):
        assert get_default_metrics().registry is REGISTRY
