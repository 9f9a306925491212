"""One-line status bar below the panes."""

from __future__ import annotations

from rich.text import Text

from mongotui.core.context import Context
from mongotui.domains.query.ui.pane import pagination_summary

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


def render_status_bar(ctx: Context, active_pane: str) -> Text:
    text = Text()
    if ctx.is_loading:
        text.append(f"{SPINNER_FRAMES[ctx.loading_frame % len(SPINNER_FRAMES)]} Loading  ", style="yellow")
    namespace = ctx.selected_namespace()
    if namespace is not None:
        text.append(f"{namespace[0]}.{namespace[1]}  ", style="cyan")
        text.append(pagination_summary(ctx) + "  ", style="dim")
    text.append(f"[{active_pane}]", style="bold")
    text.append("  ?: help  q: quit", style="dim")
    return text
