from __future__ import annotations

import sys

from loguru import logger

_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr only; stdout carries the JSON envelope."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT)
