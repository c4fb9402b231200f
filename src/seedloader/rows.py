"""
Fixture row descriptor.

A Row is one entry of a fixture document: the target table, its primary key
columns and its remaining fields. It renders the dialect-specific fragments
the loader stitches into INSERT, UPDATE and existence-check statements.
Primary key columns always come first in column order.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .dialects import Dialect
from .errors import EmptyTableName, InvalidFixtureError, MalformedTableName

ON_INSERT_NOW = "ON_INSERT_NOW()"
ON_UPDATE_NOW = "ON_UPDATE_NOW()"

SCHEMA_SEPARATOR = "."


@dataclass
class Row:
    """One declared fixture row."""

    table: str
    pk: dict[str, Any]
    fields: dict[str, Any] = field(default_factory=dict)
    now: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.pk:
            raise InvalidFixtureError(f"Row for table {self.table!r} has no primary key")

        overlap = [column for column in self.fields if column in self.pk]
        if overlap:
            raise InvalidFixtureError(
                f"Row for table {self.table!r} declares {', '.join(overlap)} "
                "as both primary key and field"
            )

    def qualified_table(self) -> tuple[str | None, str]:
        """
        Split the table name into (schema, table).

        Returns:
            (schema, table) for "schema.table", (None, table) for "table"

        Raises:
            EmptyTableName: If the table name is empty
            MalformedTableName: If the name has more than one separator
        """
        if not self.table:
            raise EmptyTableName()

        parts = self.table.split(SCHEMA_SEPARATOR)
        if len(parts) > 2:
            raise MalformedTableName(self.table)
        if len(parts) == 2:
            return parts[0], parts[1]
        return None, self.table

    def primary_key_columns(self) -> list[str]:
        return list(self.pk)

    def primary_key_values(self) -> list[Any]:
        return list(self.pk.values())

    def insert_columns(self) -> list[str]:
        return [*self.pk, *self.fields]

    def insert_values(self) -> list[Any]:
        values = list(self.pk.values())
        for value in self.fields.values():
            if value in (ON_INSERT_NOW, ON_UPDATE_NOW):
                value = self.now
            values.append(value)
        return values

    def insert_placeholders(self, dialect: Dialect) -> list[str]:
        return dialect.placeholders(len(self.pk) + len(self.fields))

    def update_columns(self) -> list[str]:
        # ON_INSERT_NOW() columns keep the value they were inserted with
        return [column for column, value in self.fields.items() if value != ON_INSERT_NOW]

    def update_values(self) -> list[Any]:
        values = []
        for value in self.fields.values():
            if value == ON_INSERT_NOW:
                continue
            values.append(self.now if value == ON_UPDATE_NOW else value)
        return values

    def update_assignments(self, dialect: Dialect) -> list[str]:
        """Render ``"column" = <placeholder>`` for each update column."""
        columns = self.update_columns()
        return [
            f"{dialect.quote_identifier(column)} = {placeholder}"
            for column, placeholder in zip(columns, dialect.placeholders(len(columns)))
        ]

    def where_predicate(self, dialect: Dialect, offset: int = 0) -> str:
        """
        Render the primary key equality predicate.

        Args:
            dialect: Target dialect
            offset: Number of parameters bound before the predicate; numbered
                placeholders continue from ``offset + 1``

        Returns:
            ``"a" = ? AND "b" = ?`` style predicate
        """
        columns = self.primary_key_columns()
        return " AND ".join(
            f"{dialect.quote_identifier(column)} = {placeholder}"
            for column, placeholder in zip(columns, dialect.placeholders(len(columns), offset))
        )
