"""Logging utilities for dateline builds."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "dateline"
_CONSOLE_FORMAT = "[dateline] %(levelname)s %(message)s"
# Documents render on pool threads named after their category.
_VERBOSE_CONSOLE_FORMAT = "[dateline] %(levelname)s (%(threadName)s) %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s (%(threadName)s): %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the dateline hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send dateline logs to stderr and, optionally, to ``log_file``.

    Verbose output adds the thread name so per-document messages from the
    render pool can be told apart.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Watch mode reconfigures on every start; drop handlers from earlier calls.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        logging.Formatter(_VERBOSE_CONSOLE_FORMAT if verbose else _CONSOLE_FORMAT)
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def render_thread_prefix(category: str) -> str:
    """Thread name prefix for the pool that renders ``category``."""
    return f"render-{category}"


__all__ = ["configure_logging", "get_logger", "render_thread_prefix"]
