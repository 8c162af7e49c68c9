"""
Logging utilities for the plant simulation.

Every module logs under the ``plant`` namespace so the front end can set one
level for the whole engine.

Usage:
    from plant.logging_utils import get_logger

    logger = get_logger(__name__)
    logger.info("Pump %s failed", "D")
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER = "plant"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_root_configured = False


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: Union[int, str] = logging.INFO,
    format_str: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    stream: Optional[object] = None,
) -> None:
    """
    Configure the ``plant`` logger.

    Call once at startup; later calls are ignored.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        format_str: Log message format
        date_format: Date format for timestamps
        stream: Output stream (default: sys.stderr)
    """
    global _root_configured
    if _root_configured:
        return

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(format_str, date_format))

    root.addHandler(handler)
    _root_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger under the ``plant`` hierarchy.
    """
    configure_logging()

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_level(level: Union[int, str]) -> None:
    """Set the level of every plant logger; accepts names such as "WARNING"."""
    logging.getLogger(ROOT_LOGGER).setLevel(_resolve_level(level))


def set_verbose(verbose: bool) -> None:
    """Switch every plant logger between DEBUG and INFO."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(ROOT_LOGGER).setLevel(level)


def reset_logging() -> None:
    """Drop the handler installed by configure_logging (used by tests)."""
    global _root_configured
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    _root_configured = False
