# === FILE: site_mapper/logger.py ===
"""Project-wide logging for **SiteMapper**.

All modules log through children of the ``SiteMapper`` logger
(:func:`get_logger`), so one call to :func:`init_logging` from the CLI sets
level, format and destinations for the whole package. Console output goes to
stderr; stdout is reserved for the JSON/XML a command prints.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "SiteMapper"

_LevelT = Union[int, str]


def _stderr_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """(Re)configure the ``SiteMapper`` logger, replacing any previous handlers.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a rotating logfile. *None* → stderr only.
    log_format
        Format string for :class:`logging.Formatter`.
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)

    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    lg.addHandler(_stderr_handler(log_format))
    if log_file is not None:
        lg.addHandler(_file_handler(log_file, log_format))

    lg.propagate = False
    return lg


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the project logger or one of its children (``SiteMapper.<name>``)."""
    return logging.getLogger(_LOGGER_NAME if not name else f"{_LOGGER_NAME}.{name}")


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "get_logger"]
