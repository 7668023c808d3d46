"""Logger setup for the CLI and the HTTP server.

All modules log through `logging.getLogger(__name__)`, so everything sits
under the "pam_explainer" logger. setup_logging() attaches one stderr
handler to it; stdout stays free for command output (e.g. --json).
"""

from __future__ import annotations

__all__ = ["LOG_FORMAT", "ROOT_LOGGER_NAME", "setup_logging"]

import logging
import sys
from typing import TextIO

ROOT_LOGGER_NAME = "pam_explainer"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Marks the handler installed here so repeated setup replaces it
_HANDLER_NAME = "pam_explainer.stderr"


def setup_logging(level: str | int = "INFO", stream: TextIO | None = None) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once: the previously installed handler is
    replaced, never duplicated.

    Args:
        level: Log level name ("DEBUG", "INFO", "WARNING") or number.
        stream: Output stream (default: sys.stderr).

    Returns:
        The configured "pam_explainer" logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
