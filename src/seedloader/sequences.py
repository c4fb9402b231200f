"""
Sequence realignment after explicit primary key writes.

Writing an explicit value into a sequence-backed column (SERIAL, IDENTITY)
does not advance the sequence, so the next generated key would collide with
the fixture row. After each write the corrector looks up which of the row's
key columns are actually owned by a sequence and moves those sequences to
MAX(column).
"""

import logging
from typing import Any

from opentelemetry import trace

from seedutils.tracing import trace_operation

from .dialects import Dialect

logger = logging.getLogger(__name__)


class SequenceCorrector:
    """
    Realigns PostgreSQL sequences with the data written by a fixture load.

    Sequence ownership lookups are cached for the lifetime of the instance,
    which the loader scopes to a single load call.
    """

    def __init__(self, dialect: Dialect):
        self.dialect = dialect
        self._sequences: dict[tuple[str | None, str, str], str | None] = {}

    def correct(
        self,
        cursor: Any,
        schema: str | None,
        table: str,
        key_values: dict[str, Any],
    ) -> int:
        """
        Reset the sequences backing explicitly written key columns.

        Must run in the same transaction as the write it follows.

        Args:
            cursor: Cursor on the loader's connection
            schema: Schema of the table, or None for the search path default
            table: Bare table name
            key_values: Primary key columns and the values just written

        Returns:
            Number of sequences reset
        """
        if not self.dialect.supports_sequence_correction:
            return 0

        corrected = 0
        for column, value in key_values.items():
            # Only integer keys can be sequence-generated
            if not isinstance(value, int) or isinstance(value, bool):
                continue

            sequence = self.sequence_for(cursor, schema, table, column)
            if sequence is None:
                continue

            self._reset(cursor, sequence, schema, table, column)
            corrected += 1

        return corrected

    def sequence_for(
        self, cursor: Any, schema: str | None, table: str, column: str
    ) -> str | None:
        """Return the sequence owning ``table.column``, or None if there is none."""
        key = (schema, table, column)
        if key not in self._sequences:
            cursor.execute(
                "SELECT pg_get_serial_sequence(%s, %s)",
                (self.dialect.quote_table(schema, table), column),
            )
            self._sequences[key] = cursor.fetchone()[0]
            logger.debug(
                f"Sequence for {table}.{column}: {self._sequences[key] or 'none'}"
            )
        return self._sequences[key]

    def _reset(
        self, cursor: Any, sequence: str, schema: str | None, table: str, column: str
    ) -> None:
        with trace_operation(
            "correct_sequence",
            kind=trace.SpanKind.CLIENT,
            table=table,
            column=column,
            sequence=sequence,
        ):
            cursor.execute(
                f"SELECT setval(%s, (SELECT MAX({self.dialect.quote_identifier(column)}) "
                f"FROM {self.dialect.quote_table(schema, table)}))",
                (sequence,),
            )
        logger.debug(f"Reset sequence {sequence} to MAX({column}) of {table}")
