"""Tests driving the Textual app through its pilot."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mongotui.domains.connections.domain.config import Connection
from mongotui.domains.connections.store.connections import ConnectionStore
from mongotui.domains.shell.app.main import MongoTUI
from mongotui.domains.shell.state.popups import ConnectionEditorPopup, ErrorPopup, HelpPopup
from mongotui.shared.app.runtime import RuntimeConfig

from ..mocks import FakeStore, refused_store, users_dataset


def _make_app(tmp_path: Path, store: FakeStore | None = None, connections=None) -> MongoTUI:
    connection_store = ConnectionStore(tmp_path / "connections.json")
    if connections:
        connection_store.save_all(connections)
    return MongoTUI(
        runtime=RuntimeConfig(config_dir=tmp_path),
        store=store or FakeStore(users_dataset()),
        connection_store=connection_store,
    )


async def _wait_for(pilot, condition, attempts: int = 100) -> None:
    for _ in range(attempts):
        if condition():
            return
        await pilot.pause(0.02)
    raise AssertionError("condition not reached")


class TestMongoTUI:
    @pytest.mark.asyncio
    async def test_add_connection_is_persisted(self, tmp_path: Path):
        app = _make_app(tmp_path)

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("c")
            await pilot.pause()
            assert isinstance(app.viewer.popup, ConnectionEditorPopup)
            assert app.query_one("#popup-layer").has_class("visible")

            await pilot.press(*"local", "tab", *"mongodb://localhost", "enter")
            await pilot.pause()

            assert app.viewer.popup is None
            assert not app.query_one("#popup-layer").has_class("visible")

        payload = json.loads((tmp_path / "connections.json").read_text())
        assert payload["connections"] == [{"name": "local", "uri": "mongodb://localhost"}]

    @pytest.mark.asyncio
    async def test_help_opens_and_closes(self, tmp_path: Path):
        app = _make_app(tmp_path)

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("?")
            await pilot.pause()
            assert isinstance(app.viewer.popup, HelpPopup)

            await pilot.press("escape")
            await pilot.pause()
            assert app.viewer.popup is None

    @pytest.mark.asyncio
    async def test_tab_moves_focus_between_panes(self, tmp_path: Path):
        app = _make_app(tmp_path)

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("tab")
            await pilot.pause()
            assert app.viewer.registry.active_pane_id == app.viewer.db_pane_id

    @pytest.mark.asyncio
    async def test_connect_loads_databases(self, tmp_path: Path):
        store = FakeStore(users_dataset())
        app = _make_app(tmp_path, store, [Connection("local", "mongodb://localhost")])

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("enter")
            await _wait_for(pilot, lambda: bool(app.viewer.ctx.databases))

            assert store.connected_uri == "mongodb://localhost"
            assert app.viewer.registry.active_pane_id == app.viewer.db_pane_id

    @pytest.mark.asyncio
    async def test_refused_connection_shows_error(self, tmp_path: Path):
        app = _make_app(tmp_path, refused_store(), [Connection("local", "mongodb://localhost")])

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("enter")
            await _wait_for(pilot, lambda: isinstance(app.viewer.popup, ErrorPopup))

            assert "connection refused" in app.viewer.popup.message
            assert app.viewer.ctx.is_loading is False

    @pytest.mark.asyncio
    async def test_q_quits(self, tmp_path: Path):
        store = FakeStore(users_dataset())
        app = _make_app(tmp_path, store)

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("q")
            await pilot.pause()
            assert app.action_loop.should_quit is True

        assert store.closed is True
