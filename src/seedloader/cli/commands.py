"""
CLI command implementations.

- load: upsert fixture files into a database
- check: parse and validate fixture files offline
"""

import argparse
import json
import logging
from collections import Counter
from pathlib import Path

from seedloader.dialects import Dialect
from seedloader.document import parse_document
from seedloader.errors import FileError
from seedloader.loader import LoadResult, TransactionMode, load_file

from .connections import connect, get_connection_config

logger = logging.getLogger(__name__)


def format_results_console(results: list[LoadResult]) -> str:
    lines = []
    for result in results:
        lines.append(
            f"{result.source}: {result.rows} row(s) "
            f"({result.inserted} inserted, {result.updated} updated, "
            f"{result.sequences_corrected} sequence(s) reset)"
        )
    return "\n".join(lines)


def cmd_load(args: argparse.Namespace) -> int:
    """
    Load fixture files in order, stopping at the first failure.

    Returns:
        Process exit code
    """
    dialect = Dialect.from_name(args.dialect)
    mode = (
        TransactionMode.PER_ROW_TRANSACTION
        if args.per_row_transactions
        else TransactionMode.SINGLE_TRANSACTION
    )

    try:
        connection = connect(dialect, get_connection_config(args, dialect))
    except Exception as e:
        logger.error(f"Could not connect to {dialect.value}: {e}")
        return 1

    results = []
    try:
        for path in args.files:
            try:
                results.append(load_file(path, connection, dialect, mode))
            except Exception as e:
                logger.error(f"Fixture load failed for {path}: {e}")
                return 1
    finally:
        connection.close()

    if args.format == "json":
        print(json.dumps([result.to_dict() for result in results], indent=2))
    else:
        print(format_results_console(results))

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """
    Validate fixture files and print row counts per table.

    Returns:
        Process exit code
    """
    failures = 0
    for path in args.files:
        try:
            try:
                data = Path(path).read_bytes()
            except OSError as e:
                raise FileError(path, e) from e
            rows = parse_document(data)
            for row in rows:
                row.qualified_table()
        except Exception as e:
            logger.error(f"{path}: {e}")
            failures += 1
            continue

        tables = Counter(row.table for row in rows)
        summary = ", ".join(f"{table}={count}" for table, count in tables.items())
        print(f"{path}: OK, {len(rows)} row(s){' (' + summary + ')' if summary else ''}")

    return 1 if failures else 0
