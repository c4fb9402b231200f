"""
Unit tests for the fixture Row descriptor.

Tests table name parsing, column ordering, ON_INSERT_NOW()/ON_UPDATE_NOW()
handling and placeholder rendering per dialect.
"""

from datetime import UTC, datetime

import pytest

from seedloader.dialects import Dialect
from seedloader.errors import EmptyTableName, InvalidFixtureError, MalformedTableName
from seedloader.rows import ON_INSERT_NOW, ON_UPDATE_NOW, Row

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestQualifiedTable:
    """Test schema/table splitting."""

    def test_schema_qualified(self):
        row = Row(table="schema.table", pk={"id": 1})
        assert row.qualified_table() == ("schema", "table")

    def test_unqualified(self):
        row = Row(table="table", pk={"id": 1})
        assert row.qualified_table() == (None, "table")

    def test_more_than_one_separator(self):
        row = Row(table="a.b.c", pk={"id": 1})
        with pytest.raises(MalformedTableName):
            row.qualified_table()

    def test_empty_table_name(self):
        row = Row(table="", pk={"id": 1})
        with pytest.raises(EmptyTableName):
            row.qualified_table()

    def test_table_name_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Row(table="a.b.c", pk={"id": 1}).qualified_table()


class TestRowValidation:
    """Test descriptor invariants."""

    def test_requires_primary_key(self):
        with pytest.raises(InvalidFixtureError, match="no primary key"):
            Row(table="users", pk={})

    def test_rejects_column_in_both_pk_and_fields(self):
        with pytest.raises(InvalidFixtureError, match="both primary key and field"):
            Row(table="users", pk={"id": 1}, fields={"id": 2, "name": "x"})


class TestColumnViews:
    """Test insert/update/primary key views."""

    def setup_method(self):
        self.row = Row(
            table="memberships",
            pk={"user_id": 7, "org_id": 3},
            fields={"role": "admin", "note": None},
        )

    def test_primary_key_columns_come_first(self):
        assert self.row.insert_columns() == ["user_id", "org_id", "role", "note"]
        assert self.row.insert_values() == [7, 3, "admin", None]

    def test_update_excludes_primary_keys(self):
        assert self.row.update_columns() == ["role", "note"]
        assert self.row.update_values() == ["admin", None]

    def test_primary_key_values_in_predicate_order(self):
        assert self.row.primary_key_columns() == ["user_id", "org_id"]
        assert self.row.primary_key_values() == [7, 3]

    def test_field_order_follows_document(self):
        row = Row(table="t", pk={"id": 1}, fields={"z": 1, "a": 2, "m": 3})
        assert row.insert_columns() == ["id", "z", "a", "m"]

    def test_row_without_fields(self):
        row = Row(table="t", pk={"id": 1})
        assert row.update_columns() == []
        assert row.update_values() == []
        assert row.insert_columns() == ["id"]


class TestTimestampMarkers:
    """Test ON_INSERT_NOW() and ON_UPDATE_NOW() substitution."""

    def setup_method(self):
        self.row = Row(
            table="events",
            pk={"id": 1},
            fields={
                "label": "signup",
                "created_at": ON_INSERT_NOW,
                "updated_at": ON_UPDATE_NOW,
            },
            now=FIXED_NOW,
        )

    def test_insert_uses_now_for_both_markers(self):
        assert self.row.insert_values() == [1, "signup", FIXED_NOW, FIXED_NOW]

    def test_update_skips_on_insert_now_column(self):
        assert self.row.update_columns() == ["label", "updated_at"]
        assert self.row.update_values() == ["signup", FIXED_NOW]

    def test_default_now_is_timezone_aware(self):
        row = Row(table="events", pk={"id": 1}, fields={"created_at": ON_INSERT_NOW})
        value = row.insert_values()[1]
        assert isinstance(value, datetime)
        assert value.tzinfo is not None


class TestPlaceholders:
    """Test dialect-specific SQL fragments."""

    def setup_method(self):
        self.row = Row(
            table="memberships",
            pk={"user_id": 7, "org_id": 3},
            fields={"role": "admin"},
        )

    def test_insert_placeholders_sqlite_are_numbered(self):
        assert self.row.insert_placeholders(Dialect.SQLITE) == ["?1", "?2", "?3"]

    def test_insert_placeholders_postgresql(self):
        assert self.row.insert_placeholders(Dialect.POSTGRESQL) == ["%s", "%s", "%s"]

    def test_insert_placeholders_sqlserver(self):
        assert self.row.insert_placeholders(Dialect.SQLSERVER) == ["?", "?", "?"]

    def test_where_predicate_sqlite(self):
        assert (
            self.row.where_predicate(Dialect.SQLITE)
            == '"user_id" = ?1 AND "org_id" = ?2'
        )

    def test_where_predicate_continues_numbering_after_offset(self):
        assert (
            self.row.where_predicate(Dialect.SQLITE, offset=1)
            == '"user_id" = ?2 AND "org_id" = ?3'
        )

    def test_where_predicate_sqlserver_brackets(self):
        assert self.row.where_predicate(Dialect.SQLSERVER) == "[user_id] = ? AND [org_id] = ?"

    def test_update_assignments(self):
        assert self.row.update_assignments(Dialect.SQLITE) == ['"role" = ?1']
        assert self.row.update_assignments(Dialect.POSTGRESQL) == ['"role" = %s']

    def test_invalid_column_name_rejected(self):
        row = Row(table="users", pk={"id; DROP TABLE users": 1})
        with pytest.raises(ValueError, match="Invalid SQL identifier"):
            row.where_predicate(Dialect.POSTGRESQL)
