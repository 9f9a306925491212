"""Database and collection tree pane."""

from __future__ import annotations

from rich.console import RenderableType
from rich.text import Text

from mongotui.core.actions import Action, DatabasesLoaded, Render, SelectCollection
from mongotui.core.context import Context
from mongotui.core.keys import KeyEvent
from mongotui.core.registry import Pane
from mongotui.domains.explorer.domain.tree_nodes import CollectionNode, DatabaseNode, TreeNode, flatten_tree
from mongotui.shared.ui.frame import pane_frame


class DatabasesPane(Pane):
    name = "Databases"

    def __init__(self) -> None:
        super().__init__()
        self._expanded: set[str] = set()
        self._cursor = 0
        self._rows: list[TreeNode] = []

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def rows(self) -> list[TreeNode]:
        return list(self._rows)

    def shortcuts(self) -> list[tuple[str, str]]:
        return [("j/k", "Nav"), ("enter", "Select/Expand")]

    def _rebuild(self, ctx: Context) -> None:
        names = {db.name for db in ctx.databases}
        self._expanded &= names
        self._rows = flatten_tree(ctx.databases, self._expanded)
        if self._cursor >= len(self._rows):
            self._cursor = max(len(self._rows) - 1, 0)

    def receive(self, action: Action, ctx: Context) -> Action | None:
        if isinstance(action, DatabasesLoaded):
            self._rebuild(ctx)
        return None

    def handle_key_event(self, key: KeyEvent, ctx: Context) -> Action | None:
        if not self._rows:
            return None
        if key.matches("j", "down"):
            self._cursor = min(self._cursor + 1, len(self._rows) - 1)
            return Render()
        if key.matches("k", "up"):
            self._cursor = max(self._cursor - 1, 0)
            return Render()
        if key.matches("enter", "space"):
            node = self._rows[self._cursor]
            if isinstance(node, DatabaseNode):
                if node.name in self._expanded:
                    self._expanded.discard(node.name)
                else:
                    self._expanded.add(node.name)
                self._rebuild(ctx)
                return Render()
            return SelectCollection(node.db_index, node.coll_index)
        return None

    def _is_selected(self, node: TreeNode, ctx: Context) -> bool:
        if isinstance(node, CollectionNode):
            return (
                ctx.selected_db_index == node.db_index
                and ctx.selected_coll_index == node.coll_index
                and ctx.selected_collection() is not None
            )
        return False

    def render(self, is_active: bool, ctx: Context) -> RenderableType:
        if not self._rows:
            body = Text("Not connected." if not ctx.databases else "", style="dim")
        else:
            body = Text()
            for index, node in enumerate(self._rows):
                if isinstance(node, DatabaseNode):
                    marker = "▾ " if node.expanded else "▸ "
                    line = Text(marker + node.get_label_text(), style="bold")
                else:
                    marker = "● " if self._is_selected(node, ctx) else "  "
                    line = Text("    " + marker + node.get_label_text())
                if index == self._cursor and is_active:
                    line.stylize("reverse")
                if index:
                    body.append("\n")
                body.append_text(line)
        return pane_frame(body, title="[2] Databases", is_active=is_active, shortcuts=self.shortcuts())
