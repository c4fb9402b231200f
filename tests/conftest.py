"""
Pytest configuration and fixtures for seedloader tests.
Provides an in-memory SQLite database with seeding tables and an isolated
metrics registry.
"""

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from seedutils.metrics import FixtureMetrics

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    email TEXT NOT NULL,
    name TEXT
);
CREATE TABLE memberships (
    user_id INTEGER NOT NULL REFERENCES users (id),
    org_id INTEGER NOT NULL,
    role TEXT,
    PRIMARY KEY (user_id, org_id)
);
CREATE TABLE events (
    id INTEGER PRIMARY KEY,
    label TEXT,
    created_at TEXT,
    updated_at TEXT
);
"""


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sqlite_conn() -> Iterator[sqlite3.Connection]:
    """In-memory SQLite database with the users/memberships/events tables."""
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    conn.commit()
    yield conn
    conn.close()


@pytest.fixture
def metrics() -> FixtureMetrics:
    """FixtureMetrics on a private registry so counts start at zero."""
    return FixtureMetrics(registry=CollectorRegistry())


@pytest.fixture
def write_fixture(tmp_path: Path):
    """Write fixture text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write

