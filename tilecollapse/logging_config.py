"""
Logging configuration for tools.

All tilecollapse.* loggers propagate to one console handler installed on
the package logger.

Usage:
    from tilecollapse.logging_config import setup_logging
    setup_logging(logging.DEBUG)
"""

import logging
import sys

LOGGER_NAME = "tilecollapse"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure console logging for the package.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Minimum level written to stderr

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
