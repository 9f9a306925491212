"""Main Textual application for mongotui.

The Textual side is a thin shell: it forwards keys and resizes into the
ActionLoop, runs the loop as a worker, and redraws the pane widgets from the
viewer's state whenever a Render action goes by.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Static

from mongotui.core.actions import Action, DeleteConnection, Error, Quit, Render, SaveConnection
from mongotui.core.context import Context
from mongotui.core.keys import KeyEvent
from mongotui.db.client import MongoStore, RemoteStore
from mongotui.domains.connections.store.connections import ConnectionStore, resolve_connections_path
from mongotui.domains.shell.app.loop import ActionLoop
from mongotui.domains.shell.app.orchestrator import BackgroundRunner
from mongotui.domains.shell.app.viewer import MongoViewer
from mongotui.domains.shell.ui.popups import render_popup
from mongotui.domains.shell.ui.status import render_status_bar
from mongotui.shared.app.runtime import RuntimeConfig

logger = logging.getLogger(__name__)

PANE_WIDGET_IDS = ("connections-pane", "databases-pane", "query-pane", "documents-pane")


class MongoTUI(App):
    """Terminal browser for MongoDB databases, collections and documents."""

    TITLE = "mongotui"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layers: base overlay;
    }

    #main {
        height: 1fr;
    }

    #sidebar {
        width: 32%;
        height: 1fr;
    }

    #content {
        width: 1fr;
        height: 1fr;
    }

    #connections-pane {
        height: 35%;
    }

    #databases-pane {
        height: 1fr;
    }

    #query-pane {
        height: auto;
    }

    #documents-pane {
        height: 1fr;
    }

    #status-bar {
        height: 1;
        padding: 0 1;
    }

    #popup-layer {
        layer: overlay;
        width: 100%;
        height: 100%;
        align: center middle;
        display: none;
    }

    #popup-layer.visible {
        display: block;
    }

    #popup {
        width: 80%;
        height: auto;
        max-height: 90%;
    }
    """

    # Keys Textual would otherwise consume before on_key sees them.
    BINDINGS: ClassVar[list[Any]] = [
        Binding("tab", "forward_key('tab')", show=False, priority=True),
        Binding("shift+tab", "forward_key('shift+tab')", show=False, priority=True),
        Binding("ctrl+c", "forward_key('ctrl+c')", show=False, priority=True),
    ]

    def __init__(
        self,
        *,
        runtime: RuntimeConfig | None = None,
        store: RemoteStore | None = None,
        connection_store: ConnectionStore | None = None,
    ) -> None:
        super().__init__()
        self.runtime = runtime or RuntimeConfig.from_env()
        self.store = store if store is not None else MongoStore(self.runtime.server_timeout_ms)
        self.connection_store = connection_store or ConnectionStore(
            resolve_connections_path(self.runtime.config_dir)
        )
        ctx = Context(
            connections=self.connection_store.load_all(),
            default_limit=self.runtime.default_limit,
            clipboard=self.copy_to_clipboard,
        )
        channel: asyncio.Queue = asyncio.Queue()
        self.runner = BackgroundRunner(channel)
        self.viewer = MongoViewer(self.store, self.runner, ctx)
        self.action_loop = ActionLoop(
            self.viewer,
            channel,
            tick_rate=self.runtime.tick_rate,
            frame_rate=self.runtime.frame_rate,
        )
        self.action_loop.add_listener(self._on_action)

    def compose(self) -> ComposeResult:
        with Horizontal(id="main"):
            with Vertical(id="sidebar"):
                yield Static(id="connections-pane")
                yield Static(id="databases-pane")
            with Vertical(id="content"):
                yield Static(id="query-pane")
                yield Static(id="documents-pane")
        yield Static(id="status-bar")
        with Container(id="popup-layer"):
            yield Static(id="popup")

    def on_mount(self) -> None:
        self.redraw()
        self.run_worker(self.action_loop.run(), name="action-loop", exclusive=True)

    async def on_unmount(self) -> None:
        close = getattr(self.store, "close", None)
        if callable(close):
            await asyncio.to_thread(close)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.action_loop.feed_key(KeyEvent(event.key, event.character))

    def on_resize(self, event: events.Resize) -> None:
        self.action_loop.feed_resize(event.size.width, event.size.height)

    def action_forward_key(self, key: str) -> None:
        self.action_loop.feed_key(KeyEvent(key))

    def _on_action(self, action: Action) -> None:
        if isinstance(action, Quit):
            self.exit()
        elif isinstance(action, (SaveConnection, DeleteConnection)):
            self._persist_connections()
        elif isinstance(action, Render):
            self.redraw()

    def _persist_connections(self) -> None:
        try:
            self.connection_store.save_all(self.viewer.ctx.connections)
        except OSError as exc:
            logger.error("Could not save connections to %s: %s", self.connection_store.file_path, exc)
            self.action_loop.send(Error(f"Could not save connections: {exc}"))

    def redraw(self) -> None:
        """Redraw every pane, the status bar and the popup from current state."""
        try:
            layer = self.query_one("#popup-layer", Container)
        except NoMatches:
            return
        viewer = self.viewer
        ctx = viewer.ctx
        panes = list(viewer.registry)
        for widget_id, pane in zip(PANE_WIDGET_IDS, panes):
            is_active = viewer.registry.is_active(pane.id)
            self.query_one(f"#{widget_id}", Static).update(pane.render(is_active, ctx))

        active = viewer.registry.active_pane
        self.query_one("#status-bar", Static).update(
            render_status_bar(ctx, active.name if active is not None else "")
        )

        if viewer.popup is None:
            layer.remove_class("visible")
        else:
            self.query_one("#popup", Static).update(render_popup(viewer.popup, ctx))
            layer.add_class("visible")
