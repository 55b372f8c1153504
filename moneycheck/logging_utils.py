"""Mini README: Application-wide logging helpers for Money Check.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - optional helper to adjust global logging level.

Usage:
    Modules import ``get_logger`` and log persisted mutations at info level,
    staged edits and no-ops at debug level, and dropped stored data as
    warnings. Configuration happens exactly once so reloads in development do
    not stack duplicate handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger with a readable, timestamped formatter.

    Later calls only adjust the level when one is passed explicitly.
    """

    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        if level is not None:
            logging.getLogger().setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level if level is not None else logging.INFO)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
