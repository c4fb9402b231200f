"""
Declarative database fixtures.

Loads YAML fixture documents into PostgreSQL, SQL Server or SQLite,
inserting rows whose primary key is absent and updating rows whose primary
key is present.

Usage:
    import psycopg2
    from seedloader import TransactionMode, load_files

    conn = psycopg2.connect(dsn)
    load_files(["fixtures/users.yml", "fixtures/orders.yml"], conn, "postgresql")
"""

from .dialects import Dialect
from .document import parse_document
from .errors import (
    AmbiguousPrimaryKeyError,
    EmptyTableName,
    FileError,
    FixtureError,
    InvalidFixtureError,
    MalformedTableName,
    RowProcessingError,
)
from .loader import FixtureLoader, LoadResult, TransactionMode, load, load_file, load_files
from .rows import ON_INSERT_NOW, ON_UPDATE_NOW, Row
from .sequences import SequenceCorrector

__version__ = "1.0.0"
__all__ = [
    "load",
    "load_file",
    "load_files",
    "parse_document",
    "FixtureLoader",
    "LoadResult",
    "TransactionMode",
    "Dialect",
    "Row",
    "SequenceCorrector",
    "ON_INSERT_NOW",
    "ON_UPDATE_NOW",
    "FixtureError",
    "MalformedTableName",
    "EmptyTableName",
    "InvalidFixtureError",
    "AmbiguousPrimaryKeyError",
    "RowProcessingError",
    "FileError",
]
