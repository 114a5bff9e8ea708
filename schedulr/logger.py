"""
Central logging setup.

Modules only call logging.getLogger(__name__); the CLI configures the
"schedulr" parent logger once via setup_logger().
"""

from __future__ import annotations

import logging
import os
import sys


LOGGER_NAME = "schedulr"


def _level_from_env(default: int) -> int:
    name = os.environ.get("SCHEDULR_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def setup_logger(verbose: bool = False, level: int | None = None) -> logging.Logger:
    """
    Configure and return the package logger.

    Precedence: explicit level > --verbose > SCHEDULR_LOG_LEVEL > WARNING.
    Calling this twice never adds a second handler.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if level is None:
        level = logging.DEBUG if verbose else _level_from_env(logging.WARNING)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
