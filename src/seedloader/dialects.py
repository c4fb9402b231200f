"""
Supported SQL dialects.

Each Dialect member fixes everything the loader needs to know about a
backend: the DB-API driver behind it, how bound parameters are spelled,
how identifiers are quoted, how a schema-qualified table is reached, and
whether explicit primary key writes can leave a sequence behind.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from seedutils.sql_safety import quote_identifier, quote_qualified


class Dialect(str, Enum):
    """
    Enumeration of supported database backends.

    Inherits from str so members compare equal to their names and
    serialize cleanly.
    """

    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    SQLITE = "sqlite"

    @classmethod
    def from_name(cls, name: "str | Dialect") -> "Dialect":
        """
        Resolve a dialect from its name, a common alias or its driver name.

        Raises:
            ValueError: If the name is not a supported dialect
        """
        if isinstance(name, Dialect):
            return name

        dialect = _ALIASES.get(str(name).strip().lower())
        if dialect is None:
            supported = ", ".join(sorted(_ALIASES))
            raise ValueError(f"Unsupported dialect {name!r}. Supported: {supported}")
        return dialect

    @classmethod
    def names(cls) -> list[str]:
        """All accepted dialect names and aliases."""
        return sorted(_ALIASES)

    @classmethod
    def from_connection(cls, connection: Any) -> "Dialect":
        """
        Detect the dialect from a DB-API connection's module.

        Raises:
            ValueError: If the driver is not recognised
        """
        module = type(connection).__module__.lower()

        if "psycopg" in module:
            return cls.POSTGRESQL
        if "pyodbc" in module:
            return cls.SQLSERVER
        if "sqlite3" in module:
            return cls.SQLITE
        raise ValueError(f"Cannot detect dialect for connection type {type(connection)!r}")

    @property
    def driver(self) -> str:
        """DB-API driver module used for this dialect."""
        return _DRIVERS[self]

    @property
    def numbered_placeholders(self) -> bool:
        """Whether placeholders carry their parameter position."""
        return self is Dialect.SQLITE

    @property
    def uses_search_path(self) -> bool:
        """Whether schema qualification is done by switching the search path."""
        return self is Dialect.POSTGRESQL

    @property
    def supports_sequence_correction(self) -> bool:
        """Whether explicit key writes can desynchronise a sequence."""
        return self is Dialect.POSTGRESQL

    def placeholder(self, position: int) -> str:
        """
        Render the bound-parameter token for a 1-based parameter position.

        psycopg2 uses %s, pyodbc uses ?, sqlite3 accepts numbered ?N.
        """
        if self is Dialect.POSTGRESQL:
            return "%s"
        if self.numbered_placeholders:
            return f"?{position}"
        return "?"

    def placeholders(self, count: int, offset: int = 0) -> list[str]:
        """Render ``count`` placeholders numbered from ``offset + 1``."""
        return [self.placeholder(offset + i) for i in range(1, count + 1)]

    def bind_parameters(self, values: list[Any]) -> list[Any]:
        """
        Convert values the driver cannot bind natively.

        sqlite3's built-in date/datetime adapters are deprecated, so SQLite
        receives ISO 8601 text in the format those adapters produced.
        """
        if self is not Dialect.SQLITE:
            return list(values)
        return [_iso_format(value) for value in values]

    def quote_identifier(self, identifier: str) -> str:
        return quote_identifier(identifier, self._quote_style)

    def quote_table(self, schema: str | None, table: str) -> str:
        return quote_qualified(schema, table, self._quote_style)

    def search_path_statement(self, schema: str) -> str:
        """
        Statement that makes ``schema`` the resolution target for the rest of
        the current transaction.

        Raises:
            ValueError: If the dialect has no search path
        """
        if not self.uses_search_path:
            raise ValueError(f"{self.value} has no search path")
        return f"SET LOCAL search_path TO {self.quote_identifier(schema)}"

    @property
    def _quote_style(self) -> str:
        return "bracket" if self is Dialect.SQLSERVER else "double"


def _iso_format(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat(" ")
    if isinstance(value, date):
        return value.isoformat()
    return value


_DRIVERS = {
    Dialect.POSTGRESQL: "psycopg2",
    Dialect.SQLSERVER: "pyodbc",
    Dialect.SQLITE: "sqlite3",
}

_ALIASES = {
    "postgresql": Dialect.POSTGRESQL,
    "postgres": Dialect.POSTGRESQL,
    "psycopg2": Dialect.POSTGRESQL,
    "sqlserver": Dialect.SQLSERVER,
    "mssql": Dialect.SQLSERVER,
    "pyodbc": Dialect.SQLSERVER,
    "sqlite": Dialect.SQLITE,
    "sqlite3": Dialect.SQLITE,
}
