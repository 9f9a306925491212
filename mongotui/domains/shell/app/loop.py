"""The single-threaded action loop.

Keys, resizes and timer ticks become actions; background results arrive on
the same channel. Every action is applied by the viewer one at a time, in
arrival order, and then handed to the listeners.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from mongotui.core.actions import Action, Quit, Render, Resize, Tick
from mongotui.core.keys import KeyEvent
from mongotui.domains.shell.app.orchestrator import ActionChannel
from mongotui.domains.shell.app.viewer import MongoViewer

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 4.0
DEFAULT_FRAME_RATE = 30.0

Listener = Callable[[Action], None]


class ActionLoop:
    def __init__(
        self,
        viewer: MongoViewer,
        channel: ActionChannel,
        *,
        tick_rate: float = DEFAULT_TICK_RATE,
        frame_rate: float = DEFAULT_FRAME_RATE,
    ) -> None:
        if tick_rate <= 0 or frame_rate <= 0:
            raise ValueError("tick_rate and frame_rate must be positive")
        self.viewer = viewer
        self.channel = channel
        self.tick_rate = tick_rate
        self.frame_rate = frame_rate
        self.should_quit = False
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Call ``listener`` with every action after the viewer has applied it."""
        self._listeners.append(listener)

    def send(self, action: Action) -> None:
        self.channel.put_nowait(action)

    def feed_key(self, key: KeyEvent) -> None:
        """Handle a key press and apply everything it set off."""
        action = self.viewer.handle_key_event(key)
        if action is not None:
            self.send(action)
        self.drain()

    def feed_resize(self, width: int, height: int) -> None:
        self.send(Resize(width, height))
        self.drain()

    def apply(self, action: Action) -> None:
        if isinstance(action, Quit):
            self.should_quit = True
        follow_up = self.viewer.update(action)
        for listener in self._listeners:
            try:
                listener(action)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, type(action).__name__)
        if follow_up is not None:
            self.send(follow_up)

    def drain(self) -> int:
        """Apply every queued action, including follow-ups queued meanwhile."""
        applied = 0
        while not self.should_quit:
            try:
                action = self.channel.get_nowait()
            except asyncio.QueueEmpty:
                break
            self.apply(action)
            applied += 1
        return applied

    async def run(self) -> None:
        """Run until a Quit action is applied."""
        loop = asyncio.get_running_loop()
        tick_interval = 1.0 / self.tick_rate
        frame_interval = 1.0 / self.frame_rate
        next_tick = next_frame = loop.time()
        logger.info("Action loop started (tick %.1f/s, frame %.1f/s)", self.tick_rate, self.frame_rate)

        while not self.should_quit:
            now = loop.time()
            if now >= next_tick:
                self.send(Tick())
                next_tick = now + tick_interval
            if now >= next_frame:
                self.send(Render())
                next_frame = now + frame_interval
            self.drain()
            if self.should_quit:
                break

            timeout = max(min(next_tick, next_frame) - loop.time(), 0.0)
            try:
                action = await asyncio.wait_for(self.channel.get(), timeout)
            except asyncio.TimeoutError:
                continue
            self.apply(action)
            self.drain()

        logger.info("Action loop stopped")
