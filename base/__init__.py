"""Base package utilities.

Provides get_logger(...) used across the portal packages.
"""

import logging
import os
from logging import Logger
from typing import Optional

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_level() -> int:
    name = os.getenv("PORTAL_LOG_LEVEL", "INFO").strip().upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def get_logger(
    name: str, level: Optional[int] = None, *, log_file: Optional[str] = None
) -> Logger:
    """Return a module logger.

    - Level defaults to PORTAL_LOG_LEVEL (INFO when unset).
    - Records propagate to the root logger, so handlers installed by
      setup_logging() apply. A log_file adds a dedicated file handler once.

    Args:
        name: Logger name (typically __name__)
        level: Logging level override
        log_file: Optional path to a file to also write logs to.

    Returns:
        logging.Logger: configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else _default_level())

    if log_file and not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
        for h in logger.handlers
    ):
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger
