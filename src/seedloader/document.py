"""
Fixture document parsing.

A fixture document is a YAML (or JSON) list of entries:

    - table: public.users
      pk:
        id: 1
      fields:
        email: alice@example.com
        created_at: ON_INSERT_NOW()

Entries become Row objects in document order.
"""

import logging
from typing import Any

import jsonschema
import yaml

from .errors import InvalidFixtureError
from .rows import Row

logger = logging.getLogger(__name__)

_COLUMN_MAP = {
    "type": "object",
    "propertyNames": {"type": "string"},
    "additionalProperties": {"not": {"type": ["object", "array"]}},
}

FIXTURE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Fixture document",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["table", "pk"],
        "additionalProperties": False,
        "properties": {
            "table": {"type": "string"},
            "pk": {**_COLUMN_MAP, "minProperties": 1},
            "fields": {"anyOf": [_COLUMN_MAP, {"type": "null"}]},
        },
    },
}

_VALIDATOR = jsonschema.Draft7Validator(FIXTURE_SCHEMA)


def validate_document(document: Any) -> None:
    """
    Check a parsed document against FIXTURE_SCHEMA.

    Raises:
        InvalidFixtureError: Describing the first violation, with the index
            of the offending entry when there is one
    """
    error = jsonschema.exceptions.best_match(_VALIDATOR.iter_errors(document))
    if error is None:
        return

    location = ""
    if error.absolute_path:
        entry = error.absolute_path[0]
        location = f"entry {entry + 1}" if isinstance(entry, int) else str(entry)
        rest = "/".join(str(part) for part in list(error.absolute_path)[1:])
        if rest:
            location += f" ({rest})"
        location += ": "
    raise InvalidFixtureError(f"Invalid fixture document: {location}{error.message}") from error


def parse_document(data: bytes | str) -> list[Row]:
    """
    Parse fixture document text into rows.

    Args:
        data: Raw YAML or JSON document

    Returns:
        Rows in document order; an empty document yields no rows

    Raises:
        yaml.YAMLError: If the document is not valid YAML
        InvalidFixtureError: If the document does not describe fixture rows
    """
    document = yaml.safe_load(data)
    if document is None:
        return []

    validate_document(document)

    rows = []
    for index, entry in enumerate(document, start=1):
        try:
            row = Row(
                table=entry["table"],
                pk=dict(entry["pk"]),
                fields=dict(entry.get("fields") or {}),
            )
        except InvalidFixtureError as e:
            raise InvalidFixtureError(f"Invalid fixture document: entry {index}: {e}") from e
        rows.append(row)

    logger.debug(f"Parsed {len(rows)} fixture row(s)")
    return rows
