"""
Shared utilities for seedloader

Provides:
- logging: console/JSON logging setup
- tracing: OpenTelemetry spans
- metrics: Prometheus counters for fixture loads
- sql_safety: identifier validation and quoting
"""

__version__ = "1.0.0"
__all__ = ["logging", "tracing", "metrics", "sql_safety"]
