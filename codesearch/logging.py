"""Logging setup for codesearch runs."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "codesearch"
_CONSOLE_FORMAT = "[codesearch] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger such as ``codesearch.walker``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route codesearch records to stderr and, optionally, to *log_file*.

    ``verbose`` wins over ``quiet``. The file sink always records INFO and
    above so a quiet console run still leaves a per-repository trail.
    """
    level = _resolve_level(verbose, quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # Drop handlers from a previous call in the same process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    effective = level
    if log_file is not None:
        file_level = min(level, logging.INFO)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(file_level)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)
        effective = file_level

    logger.setLevel(effective)
    return logger


__all__ = ["configure_logging", "get_logger"]
