"""
Logging configuration for Inkwell.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure application logging.

    :param level: Name of the log level for the ``inkwell`` logger tree
    :return: Root logger of the application
    """
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    root = logging.getLogger("inkwell")
    root.setLevel(level.upper())
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"inkwell.{name}")
