"""Shared logger initialization for taskblock.

Usage:
    from taskblock.utils.logger import get_logger
    log = get_logger(__name__)
    log.info("message")
"""
from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

_FORMAT = "%(message)s"  # rich handler already adds time & level


def _make_handler(level: int) -> RichHandler:
    handler = RichHandler(rich_tracebacks=True, markup=False, show_path=False)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT))
    return handler


def configure_logging(level: int = logging.INFO) -> None:
    """Idempotently configure the root logger with a rich handler.

    Calling again with a different level only adjusts the level of the
    handler installed on the first call.
    """
    root = logging.getLogger()
    existing = [h for h in root.handlers if isinstance(h, RichHandler)]
    if existing:
        root.setLevel(level)
        for handler in existing:
            handler.setLevel(level)
        return
    if root.handlers:
        # Someone else (pytest, an embedding app) owns the root logger.
        return
    root.setLevel(level)
    root.addHandler(_make_handler(level))


def get_logger(name: str = __name__, level: Optional[int] = None) -> logging.Logger:
    """Return a module-level logger."""
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
