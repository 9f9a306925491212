"""Connection store for managing saved MongoDB connections."""

from __future__ import annotations

import logging
from pathlib import Path

from mongotui.domains.connections.domain.config import Connection
from mongotui.shared.core.store import CONFIG_DIR, JSONFileStore

logger = logging.getLogger(__name__)

LOCAL_CONFIG_NAME = ".mongotui.json"


def resolve_connections_path(config_dir: Path | None = None, cwd: Path | None = None) -> Path:
    """Pick the connections file: a local one in ``cwd`` wins over the config dir."""
    local_file = (cwd or Path.cwd()) / LOCAL_CONFIG_NAME
    if local_file.exists():
        return local_file
    return (config_dir or CONFIG_DIR) / "connections.json"


class ConnectionStore(JSONFileStore):
    """Store for managing saved connections.

    Connections are stored as a versioned JSON object. Older files holding a
    bare list, or an object without a version, are migrated on load.
    """

    _CURRENT_VERSION = 2
    _CONNECTIONS_KEY = "connections"
    _VERSION_KEY = "version"

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or resolve_connections_path())

    def load_all(self) -> list[Connection]:
        """Load all saved connections, skipping malformed entries."""
        data = self._read_json()
        if data is None:
            return []
        version, raw_connections, needs_migration = self._unpack_connections_payload(data)
        connections: list[Connection] = []
        for raw in raw_connections:
            if not isinstance(raw, dict):
                continue
            try:
                connections.append(Connection.from_dict(raw))
            except TypeError as exc:
                logger.warning("Skipping saved connection %r: %s", raw, exc)
        if needs_migration:
            self._migrate_connections_payload(raw_connections, version)
        return connections

    def _unpack_connections_payload(self, data: object) -> tuple[int, list, bool]:
        if isinstance(data, list):
            return 1, data, True
        if isinstance(data, dict):
            raw_version = data.get(self._VERSION_KEY)
            raw_connections = data.get(self._CONNECTIONS_KEY)
            if isinstance(raw_connections, list):
                version = raw_version if isinstance(raw_version, int) else 1
                return version, raw_connections, version != self._CURRENT_VERSION
        return 0, [], False

    def _wrap_connections_payload(self, connections: list[dict]) -> dict:
        return {
            self._VERSION_KEY: self._CURRENT_VERSION,
            self._CONNECTIONS_KEY: connections,
        }

    def _migrate_connections_payload(self, connections: list, version: int) -> None:
        if version == self._CURRENT_VERSION:
            return
        try:
            self._write_json(self._wrap_connections_payload(connections))
        except OSError as exc:
            # Loading still succeeded; the file is rewritten on next save.
            logger.warning("Could not migrate %s: %s", self.file_path, exc)

    def save_all(self, connections: list[Connection]) -> None:
        """Replace the saved connection list."""
        payload = [c.to_dict() for c in connections]
        self._write_json(self._wrap_connections_payload(payload))
