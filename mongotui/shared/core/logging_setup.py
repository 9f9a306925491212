"""Logging bootstrap for mongotui.

The terminal belongs to the TUI, so records only go to a rotating file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path


@dataclass(frozen=True)
class LoggingRuntime:
    """Resolved runtime logging configuration."""

    level_name: str
    level: int
    file_path: Path


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str | None) -> tuple[str, int]:
    normalized = str(raw or "INFO").strip().upper()
    level = getattr(logging, normalized, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    return str(logging.getLevelName(level)), level


def default_log_dir() -> Path:
    override = os.environ.get("MONGOTUI_LOG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".mongotui" / "logs"


def _make_file_handler(level: int, file_path: Path) -> logging.Handler:
    handler = RotatingFileHandler(
        file_path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def configure(level: str | None = None, log_dir: Path | None = None) -> LoggingRuntime:
    """Attach the file handler to the ``mongotui`` logger.

    Idempotent: repeated calls return the originally configured runtime.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level_value = _parse_level(level or os.environ.get("MONGOTUI_LOG_LEVEL"))
    directory = log_dir or default_log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / "mongotui.log"

    logger = logging.getLogger("mongotui")
    logger.setLevel(level_value)
    logger.propagate = False
    logger.handlers.clear()
    handler = _make_file_handler(level_value, file_path)
    logger.addHandler(handler)

    # pymongo is chatty below WARNING.
    driver_logger = logging.getLogger("pymongo")
    driver_logger.setLevel(logging.WARNING)
    driver_logger.propagate = False
    driver_logger.handlers.clear()
    driver_logger.addHandler(handler)

    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name=level_name, level=level_value, file_path=file_path)
    return _RUNTIME
