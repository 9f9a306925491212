"""Document page pane: a table of chosen fields, or one JSON line per document."""

from __future__ import annotations

import logging
from enum import Enum

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from mongotui.core.actions import (
    Action,
    DocumentsLoaded,
    NextPage,
    OpenFieldSelector,
    OpenJsonPopup,
    PreviousPage,
    Render,
    SchemaLoaded,
    ToggleViewMode,
    UpdateVisibleFields,
)
from mongotui.core.context import Context
from mongotui.core.keys import KeyEvent
from mongotui.core.registry import Pane
from mongotui.db.models import Document
from mongotui.domains.documents.app.fields import (
    default_visible_fields,
    discover_fields,
    document_id_text,
    format_value,
    to_json,
)
from mongotui.shared.ui.frame import pane_frame

logger = logging.getLogger(__name__)


class ViewMode(Enum):
    TABLE = "table"
    JSON = "json"


class DocumentsPane(Pane):
    name = "Documents"

    def __init__(self) -> None:
        super().__init__()
        self.view_mode = ViewMode.TABLE
        self.all_fields: list[str] = []
        self.visible_fields: list[str] = []
        self.selected_row: int | None = None
        self.selected_column = 0
        self._namespace: tuple[str, str] | None = None

    def shortcuts(self) -> list[tuple[str, str]]:
        shortcuts = [("enter", "View"), ("j/k", "Nav")]
        if self.view_mode is ViewMode.TABLE:
            shortcuts += [("h/l", "Columns"), ("p/P", "Copy Val/Key"), ("f", "Fields")]
        shortcuts += [("y/Y", "Copy ID/Doc"), ("v", "Toggle View"), ("[/]", "Page")]
        return shortcuts

    # Broadcast handling

    def receive(self, action: Action, ctx: Context) -> Action | None:
        if isinstance(action, DocumentsLoaded):
            self._on_documents_loaded(ctx)
        elif isinstance(action, SchemaLoaded):
            if (action.db, action.collection) == self._namespace:
                self._refresh_fields(ctx)
        elif isinstance(action, UpdateVisibleFields):
            self.visible_fields = list(action.fields)
            self._clamp_column()
        elif isinstance(action, ToggleViewMode):
            self.view_mode = ViewMode.JSON if self.view_mode is ViewMode.TABLE else ViewMode.TABLE
        return None

    def _on_documents_loaded(self, ctx: Context) -> None:
        namespace = ctx.selected_namespace()
        same_collection = namespace is not None and namespace == self._namespace
        self._namespace = namespace
        self.all_fields = discover_fields(ctx.documents, ctx.schema_fields)
        kept = [f for f in self.visible_fields if f in self.all_fields] if same_collection else []
        self.visible_fields = kept or default_visible_fields(self.all_fields)
        self.selected_row = 0 if ctx.documents else None
        self._clamp_column()

    def _refresh_fields(self, ctx: Context) -> None:
        self.all_fields = discover_fields(ctx.documents, ctx.schema_fields)
        if not self.visible_fields:
            self.visible_fields = default_visible_fields(self.all_fields)

    def _clamp_column(self) -> None:
        self.selected_column = min(self.selected_column, max(len(self.visible_fields) - 1, 0))

    # Key handling

    def _current_document(self, ctx: Context) -> Document | None:
        row = self.selected_row
        if row is None or not 0 <= row < len(ctx.documents):
            return None
        return ctx.documents[row]

    def _copy(self, ctx: Context, text: str, what: str) -> None:
        if not ctx.copy_to_clipboard(text):
            logger.debug("No clipboard available to copy %s", what)

    def handle_key_event(self, key: KeyEvent, ctx: Context) -> Action | None:
        if key.matches("v"):
            return ToggleViewMode()
        if key.matches("]"):
            return NextPage()
        if key.matches("["):
            return PreviousPage()
        if key.matches("f"):
            return OpenFieldSelector(tuple(self.all_fields), tuple(self.visible_fields))

        count = len(ctx.documents)
        if key.matches("j", "down"):
            if count == 0:
                return None
            self.selected_row = 0 if self.selected_row is None else min(self.selected_row + 1, count - 1)
            return Render()
        if key.matches("k", "up"):
            if count == 0:
                return None
            self.selected_row = 0 if self.selected_row is None else max(self.selected_row - 1, 0)
            return Render()
        if self.view_mode is ViewMode.TABLE:
            if key.matches("h", "left") and self.selected_column > 0:
                self.selected_column -= 1
                return Render()
            if key.matches("l", "right") and self.selected_column < len(self.visible_fields) - 1:
                self.selected_column += 1
                return Render()

        doc = self._current_document(ctx)
        if doc is None:
            return None
        if key.matches("enter"):
            doc_id = document_id_text(doc) or "?"
            return OpenJsonPopup(to_json(doc, indent=2), f"Document {doc_id}")
        if key.matches("y"):
            self._copy(ctx, document_id_text(doc), "_id")
        elif key.matches("Y"):
            self._copy(ctx, to_json(doc, indent=2), "document")
        elif self.view_mode is ViewMode.TABLE and self.visible_fields:
            field = self.visible_fields[self.selected_column]
            if key.matches("p"):
                self._copy(ctx, format_value(doc[field]) if field in doc else "", "value")
            elif key.matches("P"):
                self._copy(ctx, field, "field name")
        return None

    # Rendering

    def _render_table(self, is_active: bool, ctx: Context) -> RenderableType:
        table = Table(expand=True, show_edge=False, pad_edge=False, header_style="cyan")
        for index, field in enumerate(self.visible_fields):
            highlighted = is_active and index == self.selected_column
            table.add_column(
                Text(field, style="bold yellow" if highlighted else ""),
                overflow="ellipsis",
                no_wrap=True,
                ratio=1,
            )
        for row, doc in enumerate(ctx.documents):
            cells = [Text(format_value(doc[f]) if f in doc else "") for f in self.visible_fields]
            table.add_row(*cells, style="on blue" if row == self.selected_row else None)
        return table

    def _render_json(self, ctx: Context) -> RenderableType:
        body = Text(no_wrap=True, overflow="ellipsis")
        for row, doc in enumerate(ctx.documents):
            if row:
                body.append("\n")
            body.append(to_json(doc), style="on blue" if row == self.selected_row else "")
        return body

    def render(self, is_active: bool, ctx: Context) -> RenderableType:
        if not ctx.documents:
            body: RenderableType = Text("No documents.", style="dim")
        elif self.view_mode is ViewMode.TABLE:
            body = self._render_table(is_active, ctx)
        else:
            body = self._render_json(ctx)
        return pane_frame(body, title="[4] Documents", is_active=is_active, shortcuts=self.shortcuts())
