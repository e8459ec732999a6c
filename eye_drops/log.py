"""Logging setup. Call setup_logging once at start-up, then use loguru's logger."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | "
    "{name}:{function}:{line} - {message}"
)


def setup_logging(level: str = "INFO",
                  log_file: Optional[Union[str, Path]] = None) -> None:
    handlers: list[dict] = []
    if sys.stderr is not None:  # None under pythonw
        handlers.append({
            "sink": sys.stderr,
            "level": level.upper(),
            "format": CONSOLE_FORMAT,
            "colorize": True,
        })
    if log_file:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append({
            "sink": log_file,
            "level": "DEBUG",
            "format": FILE_FORMAT,
            "rotation": "1 MB",
            "retention": "30 days",
            "encoding": "utf-8",
        })
    logger.configure(handlers=handlers)
