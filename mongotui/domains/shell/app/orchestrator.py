"""Background execution of remote-store calls.

Blocking store calls run in worker threads; each finished call posts exactly
one action onto the loop's channel. Nothing here touches the Context.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from mongotui.core.actions import Action

logger = logging.getLogger(__name__)

ActionChannel = asyncio.Queue


class BackgroundRunner:
    """Fire-and-forget tasks whose results come back as actions."""

    def __init__(self, channel: ActionChannel) -> None:
        self._channel = channel
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(
        self,
        name: str,
        work: Callable[[], Awaitable[Action | None]],
        on_error: Callable[[Exception], Action | None],
    ) -> asyncio.Task:
        """Start ``work`` as a task; its result, or ``on_error(exc)``, is posted."""

        async def run() -> None:
            try:
                result = await work()
            except Exception as exc:
                logger.warning("Background task %s failed: %s", name, exc)
                logger.debug("Background task %s traceback", name, exc_info=exc)
                result = on_error(exc)
            if result is not None:
                self._channel.put_nowait(result)

        task = asyncio.get_running_loop().create_task(run(), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Spawned background task %s", name)
        return task

    async def wait_idle(self) -> None:
        """Wait until every spawned task, including ones spawned meanwhile, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


async def run_blocking(func: Callable, *args, **kwargs):
    """Run a blocking store call off the event loop."""
    return await asyncio.to_thread(func, *args, **kwargs)
