"""Logging configuration for cashpilot.

Library modules only ask for loggers under the ``cashpilot`` namespace. The
CLI attaches the one stream handler at startup.
"""

import logging
import os
from typing import Optional, Union

LOGGER_NAME = "cashpilot"
LOG_LEVEL_ENV = "CASHPILOT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def resolve_level(level: Optional[Union[int, str]] = None) -> int:
    """Turn a level argument into a logging level number.

    Args:
        level: Level number or name such as "DEBUG". If None or not a known
            name, CASHPILOT_LOG_LEVEL is tried, then INFO is used.

    Returns:
        Logging level number
    """
    for candidate in (level, os.environ.get(LOG_LEVEL_ENV)):
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.strip():
            name = candidate.strip().upper()
            if name.isdigit():
                return int(name)
            numeric = logging.getLevelName(name)
            if isinstance(numeric, int):
                return numeric
    return logging.INFO


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Send cashpilot log records to stderr.

    Calling this more than once does not add a second handler.

    Args:
        level: Level number or name (see ``resolve_level``)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the cashpilot namespace.

    Until ``configure_logging`` runs, records are dropped by a NullHandler.

    Args:
        name: Dotted logger name, e.g. "cashpilot.domain.ledger"

    Returns:
        Logger instance
    """
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
