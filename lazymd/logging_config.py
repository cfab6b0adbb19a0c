"""Logging setup for the ``lazymd`` namespace.

The terminal belongs to the preview while it runs, so log records only go
to a file when one is requested; otherwise they are discarded.
"""

from __future__ import annotations

import logging

LOGGER_NAME = "lazymd"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_level(name: str) -> int:
    """Map a level name like ``"debug"`` to its numeric value.

    Raises ``ValueError`` for names ``logging`` does not know.
    """
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {name!r}")
    return level


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """Configure the package logger and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Avoid duplicate handlers when called more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(file_handler)
        logger.info("Logging initialized.")
    else:
        logger.addHandler(logging.NullHandler())
    return logger
