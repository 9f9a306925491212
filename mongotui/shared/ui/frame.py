"""Common chrome drawn around every pane and popup."""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from mongotui.core.keys import format_key

ACTIVE_BORDER = "yellow"
INACTIVE_BORDER = "bright_black"


def format_shortcuts(shortcuts: Sequence[tuple[str, str]]) -> str:
    return " | ".join(f"{format_key(key)}: {description}" for key, description in shortcuts)


def pane_frame(
    body: RenderableType,
    *,
    title: str,
    is_active: bool,
    shortcuts: Sequence[tuple[str, str]] = (),
) -> Panel:
    """Rounded panel whose border marks the focused pane."""
    return Panel(
        body,
        title=Text(title),
        title_align="left",
        subtitle=Text(format_shortcuts(shortcuts)) if is_active and shortcuts else None,
        box=box.ROUNDED,
        border_style=ACTIVE_BORDER if is_active else INACTIVE_BORDER,
        expand=True,
    )
