"""Pane capability and the registry that routes input between panes."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from rich.console import RenderableType

from mongotui.core.actions import Action
from mongotui.core.context import Context
from mongotui.core.keys import KeyEvent
from mongotui.core.pane_id import PaneId

logger = logging.getLogger(__name__)


class Pane(ABC):
    """A focusable region with its own input handling and rendering.

    Panes read and write the shared Context only while handling one key or
    one action. They ask for popups by returning ``Open*`` actions.
    """

    name: str = ""

    def __init__(self) -> None:
        self.id = PaneId.new()

    @abstractmethod
    def handle_key_event(self, key: KeyEvent, ctx: Context) -> Action | None:
        """Handle a key while this pane is active."""

    def receive(self, action: Action, ctx: Context) -> Action | None:
        """Observe an action broadcast to every pane."""
        return None

    @abstractmethod
    def render(self, is_active: bool, ctx: Context) -> RenderableType:
        """Build the renderable for this pane's area."""

    def shortcuts(self) -> list[tuple[str, str]]:
        return []


class PaneRegistry:
    """Ordered panes plus a single active pointer."""

    def __init__(self) -> None:
        self._panes: list[Pane] = []
        self._active: int | None = None

    def __len__(self) -> int:
        return len(self._panes)

    def __iter__(self):
        return iter(self._panes)

    def register(self, pane: Pane) -> PaneId:
        self._panes.append(pane)
        if self._active is None:
            self._active = 0
        return pane.id

    def get(self, pane_id: PaneId) -> Pane | None:
        for pane in self._panes:
            if pane.id == pane_id:
                return pane
        return None

    @property
    def active_pane(self) -> Pane | None:
        if self._active is None:
            return None
        return self._panes[self._active]

    @property
    def active_pane_id(self) -> PaneId | None:
        pane = self.active_pane
        return pane.id if pane is not None else None

    def is_active(self, pane_id: PaneId) -> bool:
        return self.active_pane_id == pane_id

    def cycle_next(self) -> None:
        if not self._panes or self._active is None:
            return
        self._active = (self._active + 1) % len(self._panes)

    def set_active(self, pane_id: PaneId) -> None:
        for index, pane in enumerate(self._panes):
            if pane.id == pane_id:
                self._active = index
                return
        logger.debug("Ignoring focus request for unknown pane %s", pane_id)

    def handle_key_event(self, key: KeyEvent, ctx: Context) -> Action | None:
        pane = self.active_pane
        if pane is None:
            return None
        return pane.handle_key_event(key, ctx)

    def broadcast(self, action: Action, ctx: Context) -> None:
        for pane in self._panes:
            result = pane.receive(action, ctx)
            if result is not None:
                logger.debug("Pane %s answered %r with %r", pane.name, action, result)

    def all_shortcuts(self) -> list[tuple[str, str]]:
        shortcuts: list[tuple[str, str]] = []
        for pane in self._panes:
            shortcuts.extend(pane.shortcuts())
        return shortcuts
