"""Minimal logging utilities for tagweave.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from tagweave.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Processing document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "tagweave." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("rules")
        >>> logger.name
        'tagweave.rules'
    """
    if not (name == "tagweave" or name.startswith("tagweave.")):
        name = f"tagweave.{name}"
    return logging.getLogger(name)
