"""Runtime configuration for mongotui."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TICK_RATE = 4.0
DEFAULT_FRAME_RATE = 30.0
DEFAULT_PAGE_LIMIT = 20
DEFAULT_SERVER_TIMEOUT_MS = 5000


@dataclass
class RuntimeConfig:
    """Runtime configuration provided by environment, CLI or tests."""

    config_dir: Path | None = None
    log_dir: Path | None = None
    log_level: str = "INFO"
    tick_rate: float = DEFAULT_TICK_RATE
    frame_rate: float = DEFAULT_FRAME_RATE
    default_limit: int = DEFAULT_PAGE_LIMIT
    server_timeout_ms: int = DEFAULT_SERVER_TIMEOUT_MS
    debug_mode: bool = False

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        def _parse_path(value: str | None) -> Path | None:
            if not value or not value.strip():
                return None
            return Path(value.strip()).expanduser()

        def _parse_positive_int(value: str | None, default: int) -> int:
            if not value:
                return default
            try:
                parsed = int(value)
            except (TypeError, ValueError):
                return default
            return parsed if parsed > 0 else default

        def _parse_positive_float(value: str | None, default: float) -> float:
            if not value:
                return default
            try:
                parsed = float(value)
            except (TypeError, ValueError):
                return default
            return parsed if parsed > 0 else default

        def _parse_bool(value: str | None, default: bool) -> bool:
            if value is None or not value.strip():
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        debug_mode = _parse_bool(os.environ.get("MONGOTUI_DEBUG"), False)
        log_level = os.environ.get("MONGOTUI_LOG_LEVEL", "").strip().upper()

        return cls(
            config_dir=_parse_path(os.environ.get("MONGOTUI_CONFIG_DIR")),
            log_dir=_parse_path(os.environ.get("MONGOTUI_LOG_DIR")),
            log_level=log_level or ("DEBUG" if debug_mode else "INFO"),
            tick_rate=_parse_positive_float(os.environ.get("MONGOTUI_TICK_RATE"), DEFAULT_TICK_RATE),
            frame_rate=_parse_positive_float(os.environ.get("MONGOTUI_FRAME_RATE"), DEFAULT_FRAME_RATE),
            default_limit=_parse_positive_int(os.environ.get("MONGOTUI_DEFAULT_LIMIT"), DEFAULT_PAGE_LIMIT),
            server_timeout_ms=_parse_positive_int(
                os.environ.get("MONGOTUI_SERVER_TIMEOUT_MS"), DEFAULT_SERVER_TIMEOUT_MS
            ),
            debug_mode=debug_mode,
        )
