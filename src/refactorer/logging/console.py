"""Console logging setup for the CLI."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "refactorer"
LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Install a single stderr handler on the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
