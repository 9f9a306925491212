"""Modal popup states.

At most one popup is open at a time and it receives every key. Each
transition is ``handle_key(key, ctx) -> (next_popup, action)`` where a
``None`` next popup closes the overlay.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from mongotui.core.actions import Action, RefreshDocuments, SaveConnection, UpdateVisibleFields
from mongotui.core.context import QUERY_FIELD_ORDER, Context, QueryField
from mongotui.core.keys import KeyEvent
from mongotui.core.text_buffer import TextBuffer
from mongotui.domains.query.app.validation import validate_query_inputs

PAGE_SCROLL = 10


class Popup(ABC):
    title: str = ""

    @abstractmethod
    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        """Apply one key; return the next popup (or None to close) and an optional action."""


def _move_cursor(cursor: int, key: KeyEvent, count: int) -> int | None:
    """New cursor for j/k style movement, or None when ``key`` is not a move."""
    if count <= 0:
        return None
    if key.matches("j", "down"):
        return min(cursor + 1, count - 1)
    if key.matches("k", "up"):
        return max(cursor - 1, 0)
    if key.matches("pagedown"):
        return min(cursor + PAGE_SCROLL, count - 1)
    if key.matches("pageup"):
        return max(cursor - PAGE_SCROLL, 0)
    return None


@dataclass
class ConnectionEditorPopup(Popup):
    """Name and URI inputs for a new saved connection."""

    name: TextBuffer = field(default_factory=lambda: TextBuffer(placeholder="My server"))
    uri: TextBuffer = field(default_factory=lambda: TextBuffer(placeholder="mongodb://localhost:27017"))
    focus: str = "name"
    title: str = "New Connection"

    @property
    def focused_buffer(self) -> TextBuffer:
        return self.uri if self.focus == "uri" else self.name

    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        if key.matches("escape"):
            return None, None
        if key.matches("tab", "shift+tab"):
            self.focus = "name" if self.focus == "uri" else "uri"
            return self, None
        if key.matches("enter"):
            name = self.name.text.strip()
            uri = self.uri.text.strip()
            if not name or not uri:
                return self, None
            return None, SaveConnection(name, uri)
        self.focused_buffer.input(key)
        return self, None


@dataclass
class QueryBuilderPopup(Popup):
    """Edits the Context's four query buffers in place."""

    focus: QueryField = QueryField.FILTER
    title: str = "Query Builder"

    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        if key.matches("escape"):
            ctx.input_validation_errors.clear()
            return None, None
        if key.matches("tab"):
            self.focus = self.focus.next()
            return self, None
        if key.matches("shift+tab"):
            index = QUERY_FIELD_ORDER.index(self.focus)
            self.focus = QUERY_FIELD_ORDER[index - 1]
            return self, None
        if key.matches("enter"):
            errors = validate_query_inputs(ctx)
            ctx.input_validation_errors = errors
            if errors:
                return self, None
            ctx.pagination.reset()
            return None, RefreshDocuments()
        if ctx.query_inputs[self.focus].input(key):
            ctx.input_validation_errors.pop(self.focus, None)
        return self, None


@dataclass
class JsonViewerPopup(Popup):
    content: str
    title: str = "Document"
    scroll: int = 0

    @property
    def line_count(self) -> int:
        return len(self.content.splitlines())

    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        if key.matches("escape", "enter", "q"):
            return None, None
        if key.matches("y"):
            ctx.copy_to_clipboard(self.content)
            return self, None
        if key.matches("g", "home"):
            self.scroll = 0
            return self, None
        if key.matches("G", "end"):
            self.scroll = max(self.line_count - 1, 0)
            return self, None
        moved = _move_cursor(self.scroll, key, self.line_count)
        if moved is not None:
            self.scroll = moved
        return self, None


@dataclass
class FieldSelectorPopup(Popup):
    """Checklist over every known field; toggles apply immediately."""

    all_fields: list[str]
    visible_fields: list[str]
    cursor: int = 0
    title: str = "Visible Fields"

    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        if key.matches("escape", "q", "f"):
            return None, None
        if key.matches("enter", "space"):
            if not self.all_fields:
                return self, None
            name = self.all_fields[self.cursor]
            chosen = set(self.visible_fields)
            if name in chosen:
                chosen.discard(name)
            else:
                chosen.add(name)
            self.visible_fields = [f for f in self.all_fields if f in chosen]
            return self, UpdateVisibleFields(tuple(self.visible_fields))
        moved = _move_cursor(self.cursor, key, len(self.all_fields))
        if moved is not None:
            self.cursor = moved
        return self, None


@dataclass
class HelpPopup(Popup):
    rows: list[tuple[str, str]] = field(default_factory=list)
    cursor: int = 0
    title: str = "Help"

    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        if key.matches("escape", "?", "q"):
            return None, None
        moved = _move_cursor(self.cursor, key, len(self.rows))
        if moved is not None:
            self.cursor = moved
        return self, None


@dataclass
class ErrorPopup(Popup):
    message: str
    title: str = "Error"

    def handle_key(self, key: KeyEvent, ctx: Context) -> tuple[Popup | None, Action | None]:
        if key.matches("escape", "enter"):
            return None, None
        return self, None
