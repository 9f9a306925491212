"""Base class for JSON-file backed stores."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _resolve_config_dir() -> Path:
    override = os.environ.get("MONGOTUI_CONFIG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".mongotui"


CONFIG_DIR = _resolve_config_dir()


class JSONFileStore:
    """Reads and writes one JSON document at a fixed path."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _read_json(self) -> Any | None:
        """Return the parsed file, or None when missing or unreadable."""
        if not self._file_path.exists():
            return None
        try:
            with open(self._file_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read %s: %s", self._file_path, exc)
            return None

    def _write_json(self, data: Any) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self._file_path)
