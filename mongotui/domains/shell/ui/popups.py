"""Rich renderables for the popup overlay."""

from __future__ import annotations

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from mongotui.core.context import QUERY_FIELD_ORDER, Context
from mongotui.core.keys import format_key
from mongotui.core.text_buffer import TextBuffer
from mongotui.domains.shell.state.popups import (
    ConnectionEditorPopup,
    ErrorPopup,
    FieldSelectorPopup,
    HelpPopup,
    JsonViewerPopup,
    Popup,
    QueryBuilderPopup,
)
from mongotui.shared.ui.frame import format_shortcuts


def buffer_text(buffer: TextBuffer, focused: bool) -> Text:
    """The buffer's text, or its placeholder, with a block cursor when focused."""
    if not buffer.text:
        text = Text(buffer.placeholder, style="dim")
        if focused:
            text = Text(" ", style="reverse") + text
        return text
    if not focused:
        return Text(buffer.text)
    before = buffer.text[: buffer.cursor]
    under = buffer.text[buffer.cursor : buffer.cursor + 1] or " "
    after = buffer.text[buffer.cursor + 1 :]
    return Text(before) + Text(under, style="reverse") + Text(after)


def _labelled(label: str, buffer: TextBuffer, focused: bool, error: str | None = None) -> Text:
    line = Text(f"{'>' if focused else ' '} {label:<11}", style="bold yellow" if focused else "bold")
    line.append_text(buffer_text(buffer, focused))
    if error:
        line.append(f"  {error}", style="red")
    return line


def _frame(body: RenderableType, title: str, hints: list[tuple[str, str]], border: str = "cyan") -> Panel:
    return Panel(
        body,
        title=Text(title),
        subtitle=Text(format_shortcuts(hints)),
        box=box.ROUNDED,
        border_style=border,
        padding=(1, 2),
    )


def render_connection_editor(popup: ConnectionEditorPopup) -> Panel:
    body = Group(
        _labelled("Name", popup.name, popup.focus == "name"),
        _labelled("URI", popup.uri, popup.focus == "uri"),
    )
    return _frame(body, popup.title, [("tab", "Switch"), ("enter", "Save"), ("esc", "Cancel")])


def render_query_builder(popup: QueryBuilderPopup, ctx: Context) -> Panel:
    lines = [
        _labelled(
            field.label,
            ctx.query_inputs[field],
            popup.focus is field,
            ctx.input_validation_errors.get(field),
        )
        for field in QUERY_FIELD_ORDER
    ]
    return _frame(Group(*lines), popup.title, [("tab", "Next field"), ("enter", "Run"), ("esc", "Cancel")])


def render_json_viewer(popup: JsonViewerPopup) -> Panel:
    syntax = Syntax(
        popup.content,
        "json",
        theme="ansi_dark",
        word_wrap=True,
        line_numbers=True,
        line_range=(popup.scroll + 1, None),
    )
    return _frame(syntax, popup.title, [("j/k", "Scroll"), ("y", "Copy"), ("esc", "Close")])


def render_field_selector(popup: FieldSelectorPopup) -> Panel:
    body = Text()
    visible = set(popup.visible_fields)
    for index, name in enumerate(popup.all_fields):
        line = Text(f"[{'x' if name in visible else ' '}] {name}")
        if index == popup.cursor:
            line.stylize("reverse")
        if index:
            body.append("\n")
        body.append_text(line)
    if not popup.all_fields:
        body = Text("No fields loaded yet.", style="dim")
    return _frame(body, popup.title, [("j/k", "Nav"), ("space", "Toggle"), ("esc", "Close")])


def render_help(popup: HelpPopup) -> Panel:
    table = Table(box=None, show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Key", no_wrap=True)
    table.add_column("Action")
    for index, (key, description) in enumerate(popup.rows):
        style = "reverse" if index == popup.cursor else None
        table.add_row(Text(format_key(key)), Text(description), style=style)
    return _frame(table, popup.title, [("j/k", "Scroll"), ("?/esc", "Close")])


def render_error(popup: ErrorPopup) -> Panel:
    return _frame(Text(popup.message, style="red"), popup.title, [("esc", "Close")], border="red")


def render_popup(popup: Popup, ctx: Context) -> RenderableType:
    if isinstance(popup, ConnectionEditorPopup):
        return render_connection_editor(popup)
    if isinstance(popup, QueryBuilderPopup):
        return render_query_builder(popup, ctx)
    if isinstance(popup, JsonViewerPopup):
        return render_json_viewer(popup)
    if isinstance(popup, FieldSelectorPopup):
        return render_field_selector(popup)
    if isinstance(popup, HelpPopup):
        return render_help(popup)
    if isinstance(popup, ErrorPopup):
        return render_error(popup)
    raise TypeError(f"No renderer for popup {type(popup).__name__}")
