"""
Logging setup for the Dreamer tools.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by whichever driver owns the process (the CLI).

  Console:  rich.logging.RichHandler on stderr, WARNING+ by default
  File:     optional, DEBUG+, ``<log_dir>/<name>_YYYYMMDD_HHMMSS.log``
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import (DEFAULT_CONSOLE_LEVEL, DEFAULT_LEVEL, LOG_DATE_FORMAT,
                     LOG_DIR, LOG_FILE_FORMAT, LOG_NAME)

Level = Union[int, str]


def setup_logging(
    name: str = LOG_NAME,
    level: Level = DEFAULT_LEVEL,
    console_level: Level = DEFAULT_CONSOLE_LEVEL,
    log_dir: Optional[Path] = None,
    log_file: bool = False,
) -> logging.Logger:
    """Configure and return the ``name`` logger.

    Safe to call more than once: if the logger already has handlers only
    the console level is updated.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        for handler in logger.handlers:
            if isinstance(handler, RichHandler):
                handler.setLevel(console_level)
        return logger
    logger.setLevel(level)
    logger.propagate = False

    # ── Console handler ──
    ch = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(ch)

    # ── File handler: captures everything ──
    if log_file:
        log_dir = log_dir or LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = log_dir / f"{name}_{ts}.log"
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(fh)
        logger.info("Log file: %s", path)

    return logger
