# src/cotask/connectors/asyncio_connector.py

from __future__ import annotations

"""
asyncio bridge.

- AsyncioCollaborator: external operations that are coroutines running on an
  asyncio loop (the engine polls the asyncio task, it never awaits it).
- drive(): runs a Scheduler inside an asyncio program, yielding to the loop
  between turns so those coroutines make progress.

Both must be used from the thread that runs the asyncio loop.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.scheduler import Scheduler, TaskHandle
from ..core.signals import Pending, Poll, Ready, TaskResult
from .futures_connector import result_from_future

logger = logging.getLogger(__name__)


class AsyncioCollaborator:
    """Requests are zero-argument callables returning an awaitable."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def start(self, request: Callable[[], Awaitable[Any]]) -> asyncio.Future:
        loop = self._loop or asyncio.get_running_loop()
        return asyncio.ensure_future(request(), loop=loop)

    def poll(self, handle: asyncio.Future) -> Poll[TaskResult]:
        if not handle.done():
            return Pending
        return Ready(result_from_future(handle))


async def drive(scheduler: Scheduler, *, idle_sleep: float = 0.0) -> dict[TaskHandle, TaskResult]:
    """
    Run scheduler turns until it is idle, yielding to the event loop after
    every turn. Returns (and releases) all collected results.

    To stop early, cancel the coroutine/task; queued tasks stay queued.
    """
    sleep_s = max(0.0, float(idle_sleep))
    started_at = scheduler.turns

    while not scheduler.is_idle:
        scheduler.check_turn_limit(started_at)
        scheduler.run_turn()
        await asyncio.sleep(sleep_s)

    logger.debug("%s: idle after %d turns", scheduler.name, scheduler.turns)
    return scheduler.collect_results()
