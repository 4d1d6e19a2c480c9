# src/cotask/connectors/futures_connector.py

from __future__ import annotations

"""
Collaborator that runs blocking callables on a concurrent.futures executor.

The engine thread only ever checks `future.done()`; it never waits on a
future. Outcomes are mapped to results:
- callable returned v            -> Success(v)
- callable raised OperationFailure -> Failure(kind, detail)
- callable raised anything else  -> Failure("error", ...) (logged)
- future cancelled               -> Failure("cancelled")
"""

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as futures_wait
from typing import Any

from ..core.errors import OperationFailure
from ..core.signals import Failure, Pending, Poll, Ready, Success, TaskResult

logger = logging.getLogger(__name__)


def result_from_future(future: Any) -> TaskResult:
    """Map a finished concurrent.futures / asyncio future to a TaskResult."""
    if future.cancelled():
        return Failure("cancelled", "operation was cancelled")

    exc = future.exception()
    if exc is None:
        return Success(future.result())
    if isinstance(exc, OperationFailure):
        return Failure(exc.kind, exc.detail)

    logger.warning("External operation raised %s: %s", type(exc).__name__, exc)
    return Failure("error", f"{type(exc).__name__}: {exc}")


class FuturesCollaborator:
    """
    Runs each request (a zero-argument callable) on an executor.

    If no executor is passed, a private thread pool is created and shut down
    by `close()`.
    """

    def __init__(self, executor: Executor | None = None, *, max_workers: int = 4) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="cotask-io",
        )
        self._in_flight: set[Future] = set()

    def start(self, request: Callable[[], Any]) -> Future:
        future = self._executor.submit(request)
        self._in_flight.add(future)
        future.add_done_callback(self._in_flight.discard)
        return future

    def poll(self, handle: Future) -> Poll[TaskResult]:
        if not handle.done():
            return Pending
        return Ready(result_from_future(handle))

    def close(self, *, wait: bool = False) -> None:
        """
        Cancel operations that have not started yet.

        With wait=True, block until the ones already running have finished,
        so resources they use can be released safely afterwards.
        """
        in_flight = list(self._in_flight)
        for future in in_flight:
            future.cancel()
        if wait:
            futures_wait(in_flight)
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> FuturesCollaborator:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
