"""
Database connection settings for the CLI.

Settings come from command-line arguments first and environment variables
second, per dialect:

- PostgreSQL: POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DB, POSTGRES_USER, POSTGRES_PASSWORD
- SQL Server: SQLSERVER_HOST, SQLSERVER_PORT, SQLSERVER_DATABASE, SQLSERVER_USER,
  SQLSERVER_PASSWORD, SQLSERVER_DRIVER
- SQLite: SQLITE_DATABASE
"""

import argparse
import importlib
import logging
import os
from typing import Any

from seedloader.dialects import Dialect

logger = logging.getLogger(__name__)

DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"


def get_connection_config(args: argparse.Namespace, dialect: Dialect) -> dict[str, Any]:
    """
    Resolve connection settings for a dialect.

    Args:
        args: Parsed ``load`` arguments
        dialect: Target dialect

    Returns:
        Connection settings understood by connect()

    Raises:
        ValueError: If a required setting is missing
    """
    if args.dsn:
        return {"dsn": args.dsn}

    if dialect is Dialect.SQLITE:
        database = args.database or os.getenv("SQLITE_DATABASE")
        if not database:
            raise ValueError("SQLite database path not provided (--database or SQLITE_DATABASE)")
        return {"database": database}

    if dialect is Dialect.POSTGRESQL:
        config = {
            "host": args.host or os.getenv("POSTGRES_HOST", "localhost"),
            "port": int(args.port or os.getenv("POSTGRES_PORT", "5432")),
            "database": args.database or os.getenv("POSTGRES_DB", "postgres"),
            "user": args.user or os.getenv("POSTGRES_USER", "postgres"),
            "password": args.password or os.getenv("POSTGRES_PASSWORD"),
        }
    else:
        config = {
            "host": args.host or os.getenv("SQLSERVER_HOST", "localhost"),
            "port": int(args.port or os.getenv("SQLSERVER_PORT", "1433")),
            "database": args.database or os.getenv("SQLSERVER_DATABASE", "master"),
            "user": args.user or os.getenv("SQLSERVER_USER", "sa"),
            "password": args.password or os.getenv("SQLSERVER_PASSWORD"),
            "driver": os.getenv("SQLSERVER_DRIVER", DEFAULT_ODBC_DRIVER),
        }

    if not config["password"]:
        raise ValueError(f"{dialect.value} password not provided")

    return config


def build_odbc_connection_string(config: dict[str, Any]) -> str:
    """Build a SQL Server ODBC connection string from individual settings."""
    return (
        f"DRIVER={{{config['driver']}}};"
        f"SERVER={config['host']},{config['port']};"
        f"DATABASE={config['database']};"
        f"UID={config['user']};"
        f"PWD={config['password']};"
        f"TrustServerCertificate=yes;"
    )


def connect(dialect: Dialect, config: dict[str, Any]) -> Any:
    """
    Open a DB-API connection with the dialect's driver.

    The driver module is imported on demand so that, for example, loading
    into SQLite does not require the ODBC libraries.
    """
    driver = importlib.import_module(dialect.driver)

    if dialect is Dialect.SQLITE:
        connection = driver.connect(config.get("dsn") or config["database"])
    elif dialect is Dialect.POSTGRESQL:
        if "dsn" in config:
            connection = driver.connect(config["dsn"])
        else:
            connection = driver.connect(
                host=config["host"],
                port=config["port"],
                dbname=config["database"],
                user=config["user"],
                password=config["password"],
                connect_timeout=10,
            )
    else:
        conn_str = config.get("dsn") or build_odbc_connection_string(config)
        connection = driver.connect(conn_str, timeout=10)

    logger.info(f"Connected to {dialect.value} database")
    return connection
