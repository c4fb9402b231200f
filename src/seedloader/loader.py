"""
Fixture loading engine.

Rows are upserted strictly in document order: an existence check by primary
key decides between INSERT and UPDATE, and on PostgreSQL any sequence
behind an explicitly written key is realigned in the same transaction.
Either the whole document runs in one transaction or every row commits on
its own; the first failing row aborts the load.
"""

import logging
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Any

from opentelemetry import trace

from seedutils.metrics import FixtureMetrics, get_default_metrics
from seedutils.tracing import add_span_attributes, trace_operation

from .dialects import Dialect
from .document import parse_document
from .errors import (
    AmbiguousPrimaryKeyError,
    EmptyTableName,
    FileError,
    MalformedTableName,
    RowProcessingError,
)
from .rows import Row
from .sequences import SequenceCorrector

logger = logging.getLogger(__name__)


class TransactionMode(str, Enum):
    """Transaction granularity of a load call."""

    SINGLE_TRANSACTION = "single-transaction"
    PER_ROW_TRANSACTION = "per-row-transaction"


@dataclass
class LoadResult:
    """Outcome of a successful load call."""

    inserted: int = 0
    updated: int = 0
    sequences_corrected: int = 0
    source: str | None = None

    @property
    def rows(self) -> int:
        return self.inserted + self.updated

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "rows": self.rows,
            "inserted": self.inserted,
            "updated": self.updated,
            "sequences_corrected": self.sequences_corrected,
        }


class FixtureLoader:
    """
    Upserts fixture rows over a single DB-API connection.

    The loader owns the connection's transaction for the duration of
    load_rows(); callers must not share the connection concurrently.
    """

    def __init__(
        self,
        connection: Any,
        dialect: Dialect | str,
        transaction_mode: TransactionMode | str = TransactionMode.SINGLE_TRANSACTION,
        metrics: FixtureMetrics | None = None,
    ):
        """
        Initialize the loader.

        Args:
            connection: Open DB-API connection (psycopg2, pyodbc or sqlite3)
            dialect: Dialect member or name understood by Dialect.from_name
            transaction_mode: SINGLE_TRANSACTION or PER_ROW_TRANSACTION
            metrics: Metrics sink (default: process-wide FixtureMetrics)
        """
        self.connection = connection
        self.dialect = Dialect.from_name(dialect)
        self.transaction_mode = TransactionMode(transaction_mode)
        self.metrics = metrics or get_default_metrics()
        # Schema set by SET LOCAL search_path in the open transaction
        self._search_path: str | None = None

    @property
    def per_row(self) -> bool:
        return self.transaction_mode is TransactionMode.PER_ROW_TRANSACTION

    def load_rows(self, rows: Iterable[Row]) -> LoadResult:
        """
        Upsert rows in order.

        Args:
            rows: Fixture rows in document order

        Returns:
            Counts of inserted and updated rows and reset sequences

        Raises:
            RowProcessingError: A row failed; ``.row`` is its 1-based position
            MalformedTableName, EmptyTableName: A row names an invalid table
            Exception: The driver error of a failed final commit
        """
        result = LoadResult()
        sequences = SequenceCorrector(self.dialect)
        self._search_path = None
        start_time = time.time()

        with trace_operation(
            "load_fixture",
            kind=trace.SpanKind.CLIENT,
            dialect=self.dialect.value,
            transaction_mode=self.transaction_mode.value,
        ) as span:
            with self._manual_transactions():
                cursor = self.connection.cursor()
                try:
                    for index, row in enumerate(rows, start=1):
                        self._load_row(cursor, index, row, sequences, result)
                finally:
                    cursor.close()

                if not self.per_row:
                    self._commit_batch()

            span.set_attribute("rows.inserted", result.inserted)
            span.set_attribute("rows.updated", result.updated)

        self.metrics.observe_duration(self.transaction_mode.value, time.time() - start_time)
        logger.info(
            f"Loaded {result.rows} fixture row(s): {result.inserted} inserted, "
            f"{result.updated} updated, {result.sequences_corrected} sequence(s) reset"
        )
        return result

    def _load_row(
        self,
        cursor: Any,
        index: int,
        row: Row,
        sequences: SequenceCorrector,
        result: LoadResult,
    ) -> None:
        with trace_operation("load_fixture_row", row=index, table=row.table):
            try:
                schema, table = row.qualified_table()
            except (MalformedTableName, EmptyTableName):
                self._rollback()
                self.metrics.record_failure("table_name")
                raise

            try:
                operation = self._upsert(cursor, row, schema, table)
                corrected = sequences.correct(
                    cursor, schema or self._search_path, table, row.pk
                )
            except Exception as e:
                self._rollback()
                self.metrics.record_failure("row")
                logger.error(f"Fixture row {index} ({row.table}) failed: {e}")
                raise RowProcessingError(index, e) from e

            if self.per_row:
                try:
                    self.connection.commit()
                except Exception as e:
                    self._rollback()
                    self.metrics.record_failure("commit")
                    raise RowProcessingError(index, e) from e
                self._search_path = None

            add_span_attributes(operation=operation, sequences_corrected=corrected)

        if operation == "insert":
            result.inserted += 1
        else:
            result.updated += 1
        result.sequences_corrected += corrected

        self.metrics.record_row(table, operation)
        self.metrics.record_sequence_correction(table, corrected)
        logger.debug(
            f"Row {index}: {operation} {row.table}",
            extra={"table_name": row.table, "row": index, "operation": operation},
        )

    def _upsert(self, cursor: Any, row: Row, schema: str | None, table: str) -> str:
        """Run the existence check and the INSERT or UPDATE; return the operation."""
        if schema is not None and self.dialect.uses_search_path:
            cursor.execute(self.dialect.search_path_statement(schema))
            self._search_path = schema
            target = self.dialect.quote_table(None, table)
        else:
            target = self.dialect.quote_table(schema, table)

        cursor.execute(
            f"SELECT COUNT(*) FROM {target} WHERE {row.where_predicate(self.dialect)}",
            self.dialect.bind_parameters(row.primary_key_values()),
        )
        count = cursor.fetchone()[0]

        if count == 0:
            columns = ", ".join(self.dialect.quote_identifier(c) for c in row.insert_columns())
            placeholders = ", ".join(row.insert_placeholders(self.dialect))
            cursor.execute(
                f"INSERT INTO {target} ({columns}) VALUES ({placeholders})",
                self.dialect.bind_parameters(row.insert_values()),
            )
            return "insert"

        if count > 1:
            raise AmbiguousPrimaryKeyError(row.table, count)

        assignments = row.update_assignments(self.dialect)
        if assignments:
            where = row.where_predicate(self.dialect, offset=len(assignments))
            cursor.execute(
                f"UPDATE {target} SET {', '.join(assignments)} WHERE {where}",
                self.dialect.bind_parameters(
                    [*row.update_values(), *row.primary_key_values()]
                ),
            )
        return "update"

    def _commit_batch(self) -> None:
        try:
            self.connection.commit()
        except Exception:
            self._rollback()
            self.metrics.record_failure("commit")
            raise

    def _rollback(self) -> None:
        # The error that triggered the rollback takes precedence
        self._search_path = None
        try:
            self.connection.rollback()
        except Exception as e:
            logger.warning(f"Rollback failed: {e}")

    @contextmanager
    def _manual_transactions(self) -> Iterator[None]:
        """Switch an autocommit connection to explicit commits for the load."""
        restore = getattr(self.connection, "autocommit", None) is True
        if restore:
            self.connection.autocommit = False
        try:
            yield
        finally:
            if restore:
                # A dead connection rejects the setter; keep the load's own error
                try:
                    self.connection.autocommit = True
                except Exception as e:
                    logger.warning(f"Could not restore autocommit: {e}")


def load(
    data: bytes | str,
    connection: Any,
    dialect: Dialect | str,
    transaction_mode: TransactionMode | str = TransactionMode.SINGLE_TRANSACTION,
    metrics: FixtureMetrics | None = None,
) -> LoadResult:
    """
    Parse a fixture document and upsert its rows.

    Args:
        data: YAML/JSON fixture document
        connection: Open DB-API connection
        dialect: Dialect member or name
        transaction_mode: Transaction granularity
        metrics: Metrics sink

    Returns:
        LoadResult for the document

    Raises:
        yaml.YAMLError: Document is not valid YAML
        InvalidFixtureError: Document does not describe fixture rows
        RowProcessingError: A row failed
    """
    loader = FixtureLoader(connection, dialect, transaction_mode, metrics)
    rows = parse_document(data)
    return loader.load_rows(rows)


def load_file(
    path: str | PathLike,
    connection: Any,
    dialect: Dialect | str,
    transaction_mode: TransactionMode | str = TransactionMode.SINGLE_TRANSACTION,
    metrics: FixtureMetrics | None = None,
) -> LoadResult:
    """
    Read a fixture file and load it.

    Raises:
        FileError: The file could not be read
        See load() for the remaining errors
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise FileError(str(path), e) from e

    logger.info(f"Loading fixture file {path}")
    result = load(data, connection, dialect, transaction_mode, metrics)
    result.source = str(path)
    return result


def load_files(
    paths: Iterable[str | PathLike],
    connection: Any,
    dialect: Dialect | str,
    transaction_mode: TransactionMode | str = TransactionMode.SINGLE_TRANSACTION,
    metrics: FixtureMetrics | None = None,
) -> list[LoadResult]:
    """
    Load fixture files in order, stopping at the first one that fails.

    Returns:
        One LoadResult per file
    """
    results = []
    for path in paths:
        results.append(load_file(path, connection, dialect, transaction_mode, metrics))
    return results
