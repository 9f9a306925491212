"""Saved-connection list pane."""

from __future__ import annotations

from rich.console import RenderableType
from rich.text import Text

from mongotui.core.actions import Action, Connect, DeleteConnection, OpenConnectionManager, Render
from mongotui.core.context import Context
from mongotui.core.keys import KeyEvent
from mongotui.core.registry import Pane
from mongotui.shared.ui.frame import pane_frame


class ConnectionsPane(Pane):
    name = "Connections"

    def shortcuts(self) -> list[tuple[str, str]]:
        return [
            ("j/k", "Nav"),
            ("enter", "Connect"),
            ("c", "New"),
            ("d", "Delete"),
        ]

    def _move(self, ctx: Context, delta: int) -> Action | None:
        count = len(ctx.connections)
        if count == 0:
            return None
        current = ctx.selected_connection
        if current is None or not 0 <= current < count:
            ctx.selected_connection = 0
        else:
            ctx.selected_connection = min(max(current + delta, 0), count - 1)
        return Render()

    def handle_key_event(self, key: KeyEvent, ctx: Context) -> Action | None:
        if key.matches("j", "down"):
            return self._move(ctx, 1)
        if key.matches("k", "up"):
            return self._move(ctx, -1)
        if key.matches("c"):
            return OpenConnectionManager()
        if key.matches("enter"):
            conn = ctx.selected_connection_info()
            return Connect(conn.uri) if conn is not None else None
        if key.matches("d", "delete"):
            if ctx.selected_connection_info() is None:
                return None
            assert ctx.selected_connection is not None
            return DeleteConnection(ctx.selected_connection)
        return None

    def render(self, is_active: bool, ctx: Context) -> RenderableType:
        if not ctx.connections:
            body = Text("No saved connections. Press c to add one.", style="dim")
        else:
            body = Text()
            for index, conn in enumerate(ctx.connections):
                selected = index == ctx.selected_connection
                line = Text("> " if selected else "  ")
                line.append(conn.name, style="bold" if selected else "")
                line.append(f"  {conn.display_uri}", style="dim")
                if selected and is_active:
                    line.stylize("reverse")
                if index:
                    body.append("\n")
                body.append_text(line)
        return pane_frame(body, title="[1] Connections", is_active=is_active, shortcuts=self.shortcuts())
