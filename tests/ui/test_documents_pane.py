"""Tests for the documents pane: fields, view modes and clipboard keys."""

from __future__ import annotations

import pytest
from rich.console import Console

from mongotui.core.actions import NextPage, SelectCollection, ToggleViewMode, UpdateVisibleFields
from mongotui.core.context import QueryField
from mongotui.core.keys import KeyEvent
from mongotui.db.models import DatabaseInfo
from mongotui.domains.documents.ui.pane import ViewMode
from mongotui.domains.shell.state.popups import FieldSelectorPopup

from ..mocks import ClipboardRecorder, FakeStore, build_viewer, settle


def wide_dataset() -> dict:
    docs = [
        {"_id": i, "a": i, "b": i, "c": i, "d": i, "e": i, "f": f"v{i}"}
        for i in range(6)
    ]
    return {"db1": {"things": docs, "others": [{"_id": 1, "x": 1}]}}


async def loaded_viewer(clipboard=None):
    store = FakeStore(wide_dataset())
    viewer, loop = build_viewer(
        store,
        databases=[DatabaseInfo.from_names("db1", ["others", "things"])],
        clipboard=clipboard,
    )
    viewer.ctx.query_inputs[QueryField.LIMIT].set_text("3")
    loop.send(SelectCollection(0, 1))
    await settle(loop)
    return viewer, loop


def render_text(pane, ctx) -> str:
    console = Console(width=120, record=True)
    console.print(pane.render(True, ctx))
    return console.export_text()


class TestVisibleFields:
    @pytest.mark.asyncio
    async def test_defaults_to_first_five(self):
        viewer, _ = await loaded_viewer()
        pane = viewer.documents_pane
        assert pane.all_fields == ["_id", "a", "b", "c", "d", "e", "f"]
        assert pane.visible_fields == ["_id", "a", "b", "c", "d"]

    @pytest.mark.asyncio
    async def test_selection_survives_paging(self):
        viewer, loop = await loaded_viewer()
        loop.send(UpdateVisibleFields(("_id", "f")))
        loop.drain()

        loop.send(NextPage())
        await settle(loop)

        assert viewer.ctx.pagination.current_page == 1
        assert viewer.documents_pane.visible_fields == ["_id", "f"]

    @pytest.mark.asyncio
    async def test_selection_resets_for_another_collection(self):
        viewer, loop = await loaded_viewer()
        loop.send(UpdateVisibleFields(("_id", "f")))
        loop.drain()

        loop.send(SelectCollection(0, 0))
        await settle(loop)

        assert viewer.documents_pane.visible_fields == ["_id", "x"]

    @pytest.mark.asyncio
    async def test_field_selector_updates_table_live(self):
        viewer, loop = await loaded_viewer()
        loop.feed_key(KeyEvent.of("4"))
        loop.feed_key(KeyEvent.of("f"))
        assert isinstance(viewer.popup, FieldSelectorPopup)

        loop.feed_key(KeyEvent.of("j"))
        loop.feed_key(KeyEvent.of("space"))

        assert isinstance(viewer.popup, FieldSelectorPopup)
        assert viewer.documents_pane.visible_fields == ["_id", "b", "c", "d"]

        loop.feed_key(KeyEvent.of("escape"))
        assert viewer.popup is None
        assert viewer.documents_pane.visible_fields == ["_id", "b", "c", "d"]


class TestViewMode:
    @pytest.mark.asyncio
    async def test_toggle_switches_rendering(self):
        viewer, loop = await loaded_viewer()
        pane = viewer.documents_pane
        assert pane.view_mode is ViewMode.TABLE
        assert '"f": "v0"' not in render_text(pane, viewer.ctx)

        loop.send(ToggleViewMode())
        loop.drain()

        assert pane.view_mode is ViewMode.JSON
        assert '"f": "v0"' in render_text(pane, viewer.ctx)

    @pytest.mark.asyncio
    async def test_v_key_toggles(self):
        viewer, loop = await loaded_viewer()
        loop.feed_key(KeyEvent.of("4"))
        loop.feed_key(KeyEvent.of("v"))
        assert viewer.documents_pane.view_mode is ViewMode.JSON
        loop.feed_key(KeyEvent.of("v"))
        assert viewer.documents_pane.view_mode is ViewMode.TABLE


class TestClipboard:
    @pytest.mark.asyncio
    async def test_copy_keys(self):
        clipboard = ClipboardRecorder()
        viewer, loop = await loaded_viewer(clipboard)
        loop.feed_key(KeyEvent.of("4"))
        loop.feed_key(KeyEvent.of("j"))

        loop.feed_key(KeyEvent.of("y"))
        loop.feed_key(KeyEvent.of("l"))
        loop.feed_key(KeyEvent.of("p"))
        loop.feed_key(KeyEvent.of("P"))
        loop.feed_key(KeyEvent.of("Y"))

        assert clipboard.copied[:3] == ["1", "1", "a"]
        assert '"f": "v1"' in clipboard.copied[3]

    @pytest.mark.asyncio
    async def test_no_clipboard_is_harmless(self):
        viewer, loop = await loaded_viewer()
        loop.feed_key(KeyEvent.of("4"))
        loop.feed_key(KeyEvent.of("y"))
        assert viewer.popup is None


def test_row_cursor_stays_in_bounds():
    viewer, _ = build_viewer(documents=[{"_id": 1}, {"_id": 2}])
    pane = viewer.documents_pane
    viewer.handle_key_event(KeyEvent.of("4"))
    for _ in range(5):
        viewer.handle_key_event(KeyEvent.of("j"))
    assert pane.selected_row == 1
    for _ in range(5):
        viewer.handle_key_event(KeyEvent.of("k"))
    assert pane.selected_row == 0
