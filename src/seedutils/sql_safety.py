"""
SQL identifier safety for fixture statements.

Table, schema and column names come straight from fixture documents and are
interpolated into SQL text, so every one of them is validated before it is
quoted. Values are never interpolated; they always travel as bound parameters.
"""

import re
from typing import Literal

# Strict ASCII-only pattern for SQL identifiers
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

QuoteStyle = Literal["double", "bracket"]


def validate_identifier(identifier: str) -> None:
    """
    Validate a single SQL identifier (table, schema or column name).

    Args:
        identifier: The identifier to validate

    Raises:
        ValueError: If the identifier is empty, not a string, or contains
            characters outside ASCII letters, digits and underscores
    """
    if not isinstance(identifier, str):
        raise ValueError(f"SQL identifier must be a string, got {identifier!r}")

    if not identifier:
        raise ValueError("SQL identifier cannot be empty")

    if not VALID_IDENTIFIER.match(identifier):
        raise ValueError(
            f"Invalid SQL identifier: {identifier!r}. "
            "Only ASCII letters, digits, and underscores are allowed, "
            "and must start with a letter or underscore."
        )


def quote_identifier(identifier: str, style: QuoteStyle = "double") -> str:
    """
    Validate and quote a SQL identifier.

    Args:
        identifier: Table, schema or column name
        style: "double" for ANSI quoting ("name"), "bracket" for SQL Server ([name])

    Returns:
        Quoted identifier safe for use in SQL

    Raises:
        ValueError: If the identifier is invalid
    """
    validate_identifier(identifier)

    if style == "bracket":
        return f"[{identifier}]"
    return f'"{identifier}"'


def quote_qualified(schema: str | None, name: str, style: QuoteStyle = "double") -> str:
    """
    Quote an optionally schema-qualified name, each part separately.

    Args:
        schema: Schema name, or None for an unqualified name
        name: Table name
        style: Quote style, see quote_identifier

    Returns:
        "schema"."name" or "name"
    """
    if schema is None:
        return quote_identifier(name, style)
    return f"{quote_identifier(schema, style)}.{quote_identifier(name, style)}"
