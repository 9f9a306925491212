"""Pytest fixtures for mongotui tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="mongotui-test-config-"))
os.environ.setdefault("MONGOTUI_CONFIG_DIR", str(_TEST_CONFIG_DIR))
os.environ.setdefault("MONGOTUI_LOG_DIR", str(_TEST_CONFIG_DIR / "logs"))

from .mocks import FakeStore, users_dataset  # noqa: E402


@pytest.fixture
def store() -> FakeStore:
    """A store holding ``db1.users`` with ten documents."""
    return FakeStore(users_dataset())


@pytest.fixture
def connections_file(tmp_path: Path) -> Path:
    return tmp_path / "connections.json"
