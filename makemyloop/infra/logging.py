# makemyloop/infra/logging.py
# -*- coding: utf-8 -*-

"""
Logging setup for the Make My Loop scripts.

Pipeline modules only call `get_logger(__name__)`. The CLI entry points call
`init_logging()` once; bulk runs also keep a per-run file under `logs/`
so a batch of loop generations can be inspected afterwards.

MAKEMYLOOP_LOG_LEVEL, if set, overrides the level passed in.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

_LEVEL_ENV = "MAKEMYLOOP_LOG_LEVEL"
_RUN_LOGS_DIR = Path("logs")

# [2025-11-17 17:47:09][INFO][makemyloop.loop.builder] Built loop ...
_FORMATTER = logging.Formatter(
      fmt="[{asctime}][{levelname}][{name}] {message}"
    , datefmt="%Y-%m-%d %H:%M:%S"
    , style="{"
)


def _run_log_path() -> Path:
    # e.g. logs/bulk_loops__20251117-174709.log
    script = Path(sys.argv[0] or "").stem or "makemyloop"
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    return _RUN_LOGS_DIR / f"{script}__{ts}.log"


def init_logging(
      level: str = "INFO"
    , *
    , run_log: bool = False
    , log_file: Optional[Path] = None
) -> Optional[Path]:
    """
    Send every `makemyloop.*` record to stdout, and optionally to a file.

    Replaces whatever handlers the root logger had.

    Parameters
    ----------
    level : str
        Level name; MAKEMYLOOP_LOG_LEVEL wins when set.
    run_log : bool
        Also write to a timestamped file under `logs/`.
    log_file : Path, optional
        Explicit file to write to (takes precedence over `run_log`).

    Returns
    -------
    Path | None : the resolved log file, if one is written.
    """
    level = os.getenv(_LEVEL_ENV) or level
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(numeric_level)

    stream_handler = logging.StreamHandler(stream=sys.stdout)
    stream_handler.setFormatter(_FORMATTER)
    root.addHandler(stream_handler)

    path: Optional[Path] = None
    if log_file is not None or run_log:
        path = Path(log_file) if log_file is not None else _run_log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(_FORMATTER)
        root.addHandler(file_handler)
        path = path.resolve()

    get_logger(__name__).info(
        "Logging configured (level=%s, file=%s)",
        logging.getLevelName(numeric_level), path,
    )
    return path


def log_banner(
      log: logging.Logger
    , msg: str
    , *
    , char: str = "="
    , width: int = 60
) -> None:
    """Log `msg` between two bars of `char`."""
    bar = char * width
    log.info(bar)
    log.info(msg)
    log.info(bar)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
