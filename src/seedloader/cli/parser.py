"""
Command-line argument parser for the seedloader CLI.
"""

import argparse

from seedloader.dialects import Dialect


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="seedloader",
        description="Load declarative YAML fixtures into a relational database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load fixtures into PostgreSQL using POSTGRES_* environment variables
  seedloader load fixtures/users.yml fixtures/orders.yml --dialect postgresql

  # Commit after every row instead of once per file
  seedloader load fixtures/*.yml --dialect postgresql --per-row-transactions

  # Load into a local SQLite database
  seedloader load fixtures/users.yml --dialect sqlite --database dev.db

  # SQL Server with an explicit ODBC connection string
  seedloader load seed.yml --dialect sqlserver --dsn "DRIVER={ODBC Driver 18 for SQL Server};..."

  # Validate fixture files without touching a database
  seedloader check fixtures/*.yml
        """,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    parser.add_argument(
        "--log-file",
        help="Also log to this rotating file",
    )
    parser.add_argument(
        "--otlp-endpoint",
        help="Export traces to this OTLP gRPC endpoint (default: $OTLP_ENDPOINT)",
    )
    parser.add_argument(
        "--trace-console",
        action="store_true",
        help="Print trace spans to stdout",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ========== Load command ==========
    load_parser = subparsers.add_parser("load", help="Upsert fixture files into a database")
    load_parser.add_argument("files", nargs="+", help="Fixture files, loaded in order")
    load_parser.add_argument(
        "--dialect",
        required=True,
        choices=Dialect.names(),
        help="Target database dialect",
    )
    load_parser.add_argument(
        "--per-row-transactions",
        action="store_true",
        help="Commit after every row instead of once per file",
    )
    load_parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Summary output format (default: console)",
    )
    load_parser.add_argument(
        "--dsn",
        help="libpq DSN (PostgreSQL) or ODBC connection string (SQL Server)",
    )
    load_parser.add_argument("--host", help="Database host")
    load_parser.add_argument("--port", type=int, help="Database port")
    load_parser.add_argument(
        "--database",
        help="Database name, or the database file path for SQLite",
    )
    load_parser.add_argument("--user", help="Database username")
    load_parser.add_argument("--password", help="Database password")

    # ========== Check command ==========
    check_parser = subparsers.add_parser(
        "check", help="Parse and validate fixture files without a database"
    )
    check_parser.add_argument("files", nargs="+", help="Fixture files to validate")

    return parser
