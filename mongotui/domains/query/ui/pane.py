"""Query summary pane: the four buffers, their errors and the page position."""

from __future__ import annotations

import math

from rich.console import Group, RenderableType
from rich.text import Text

from mongotui.core.actions import Action, NextPage, OpenQueryBuilder, PreviousPage
from mongotui.core.context import QUERY_FIELD_ORDER, Context
from mongotui.core.keys import KeyEvent
from mongotui.core.registry import Pane
from mongotui.domains.query.app.validation import current_limit
from mongotui.shared.ui.frame import pane_frame


def pagination_summary(ctx: Context) -> str:
    page = ctx.pagination.current_page + 1
    total = ctx.pagination.total_count
    limit = current_limit(ctx)
    if total is None or limit is None:
        return f"Page {page}"
    pages = max(math.ceil(total / limit), 1)
    return f"Page {page}/{pages} ({total} documents)"


class QueryPane(Pane):
    name = "Query"

    def shortcuts(self) -> list[tuple[str, str]]:
        return [("enter/e", "Edit"), ("[/]", "Page")]

    def handle_key_event(self, key: KeyEvent, ctx: Context) -> Action | None:
        if key.matches("enter", "e"):
            return OpenQueryBuilder()
        if key.matches("]"):
            return NextPage()
        if key.matches("["):
            return PreviousPage()
        return None

    def render(self, is_active: bool, ctx: Context) -> RenderableType:
        lines: list[RenderableType] = []
        namespace = ctx.selected_namespace()
        target = f"{namespace[0]}.{namespace[1]}" if namespace else "no collection selected"
        lines.append(Text(target, style="bold cyan"))
        for field in QUERY_FIELD_ORDER:
            buffer = ctx.query_inputs[field]
            line = Text(f"{field.label:<11}", style="bold")
            line.append(buffer.display_text, style="" if buffer.text else "dim")
            error = ctx.input_validation_errors.get(field)
            if error:
                line.append(f"  {error}", style="red")
            lines.append(line)
        lines.append(Text(pagination_summary(ctx), style="dim"))
        return pane_frame(Group(*lines), title="[3] Query", is_active=is_active, shortcuts=self.shortcuts())
