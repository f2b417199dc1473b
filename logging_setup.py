#!/usr/bin/env python3
"""
logging_setup.py
================
Configures the root logger with a console handler and a rotating file
handler (``catcher.log``, 1 MB, 2 backups).

Call :func:`setup_logging` once at startup before any other ``import``
triggers ``logging.getLogger()``.
"""

import logging
from logging.handlers import RotatingFileHandler

from config import ENGINE_DEBUG_LOG, LOG_FILE


def setup_logging(level: int = logging.INFO, engine_debug: bool = False) -> None:
    """Apply a unified log format to both console and file output.

    Parameters
    ----------
    level : int
        Minimum severity level (e.g. ``logging.DEBUG``, ``logging.INFO``).
    engine_debug : bool
        Also write every spawn / catch of the ``engine`` logger to a
        dedicated debug file.
    """
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)

    fh = RotatingFileHandler(LOG_FILE, maxBytes=1_000_000, backupCount=2)
    fh.setLevel(level)
    fh.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(ch)
    root.addHandler(fh)

    # ── Dedicated debug file for the per-frame engine trace ───────────
    engine_logger = logging.getLogger("engine")
    for handler in list(engine_logger.handlers):
        engine_logger.removeHandler(handler)
        handler.close()
    if not engine_debug:
        engine_logger.setLevel(logging.NOTSET)
        return
    engine_logger.setLevel(logging.DEBUG)
    dfh = RotatingFileHandler(
        ENGINE_DEBUG_LOG, maxBytes=5_000_000, backupCount=2
    )
    dfh.setLevel(logging.DEBUG)
    dfh.setFormatter(fmt)
    engine_logger.addHandler(dfh)
