"""structlog configuration for estimator entry points.

Library modules only call ``structlog.get_logger(__name__)``; entry points
(the CLI, tests that want console output) call ``configure_logging`` once.
"""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(level: str = "INFO", stream: TextIO = sys.stderr) -> None:
    """Configure structlog with ISO timestamps and console rendering.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ERROR).
        stream: Where log lines are written. Defaults to stderr so command
            output on stdout stays machine-readable.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False)
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
