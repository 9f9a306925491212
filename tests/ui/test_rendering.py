"""Rendering tests for text that looks like Rich markup."""

from __future__ import annotations

from rich.console import Console

from mongotui.core.actions import DatabasesLoaded, DocumentsLoaded
from mongotui.core.context import QueryField
from mongotui.core.keys import KeyEvent
from mongotui.db.models import DatabaseInfo
from mongotui.domains.connections.domain.config import Connection
from mongotui.domains.documents.ui.pane import DocumentsPane, ViewMode
from mongotui.domains.explorer.ui.pane import DatabasesPane
from mongotui.domains.query.ui.pane import QueryPane
from mongotui.domains.shell.state.popups import ErrorPopup, FieldSelectorPopup, HelpPopup
from mongotui.domains.shell.ui.popups import render_popup

from ..mocks import build_viewer

MARKUP_DOCS = [
    {"_id": 1, "note": "closing [/] tag"},
    {"_id": 2, "note": "[bold]loud[/bold]"},
]


def render_text(renderable) -> str:
    console = Console(width=160, record=True)
    console.print(renderable)
    return console.export_text()


def test_help_lists_bracket_shortcuts():
    viewer, _ = build_viewer()
    viewer.handle_key_event(KeyEvent.of("?"))
    assert isinstance(viewer.popup, HelpPopup)

    text = render_text(render_popup(viewer.popup, viewer.ctx))

    assert "[/]" in text
    assert "Page" in text


class TestDocumentValues:
    def _pane(self, view_mode: ViewMode):
        viewer, _ = build_viewer(documents=list(MARKUP_DOCS))
        pane = DocumentsPane()
        pane.receive(DocumentsLoaded(tuple(MARKUP_DOCS), 2, 0), viewer.ctx)
        pane.view_mode = view_mode
        return pane, viewer.ctx

    def test_table_cells_are_literal(self):
        pane, ctx = self._pane(ViewMode.TABLE)
        text = render_text(pane.render(True, ctx))
        assert "closing [/] tag" in text
        assert "[bold]loud[/bold]" in text

    def test_json_lines_are_literal(self):
        pane, ctx = self._pane(ViewMode.JSON)
        text = render_text(pane.render(True, ctx))
        assert "closing [/] tag" in text


def test_field_and_collection_names_are_literal():
    viewer, _ = build_viewer(databases=[DatabaseInfo.from_names("[b]shop", ["[/]orders"])])
    pane = DatabasesPane()
    pane.receive(DatabasesLoaded(tuple(viewer.ctx.databases)), viewer.ctx)
    pane.handle_key_event(KeyEvent.of("enter"), viewer.ctx)

    text = render_text(pane.render(True, viewer.ctx))
    assert "[b]shop" in text
    assert "[/]orders" in text

    selector = FieldSelectorPopup(all_fields=["_id", "[red]x"], visible_fields=["_id"])
    assert "[red]x" in render_text(render_popup(selector, viewer.ctx))


def test_user_typed_text_is_literal():
    viewer, _ = build_viewer(connections=[Connection("[/]prod", "mongodb://localhost")])
    viewer.ctx.query_inputs[QueryField.FILTER].set_text('{"tag": "[/]"}')

    assert "[/]prod" in render_text(viewer.connections_pane.render(True, viewer.ctx))
    assert '{"tag": "[/]"}' in render_text(QueryPane().render(True, viewer.ctx))
    assert "bad [/] input" in render_text(render_popup(ErrorPopup("bad [/] input"), viewer.ctx))
