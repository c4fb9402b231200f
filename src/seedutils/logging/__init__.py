"""
Logging configuration for seedloader.

Usage:
    from seedutils.logging import setup_logging

    setup_logging(level="DEBUG", json_format=True)
    logger = logging.getLogger(__name__)
    logger.info("Loaded fixture", extra={"table_name": "users", "rows": 12})
"""

from .config import configure_from_env, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
]
