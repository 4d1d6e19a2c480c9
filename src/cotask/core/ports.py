# src/cotask/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) the engine expects from the outside world.

The engine never performs I/O itself. A collaborator owns transport details
and only has to answer "is it done yet?" without blocking.
"""

from typing import Any, Protocol

from .signals import Poll, TaskResult


class ExternalCollaborator(Protocol):
    """
    Starts opaque operations and reports their outcome when polled.

    - start(request) initiates the operation and returns a handle
    - poll(handle) returns Pending, or Ready(Success(value) | Failure(kind))

    start() may raise OperationFailure when the operation cannot even begin.
    """

    def start(self, request: Any) -> Any: ...

    def poll(self, handle: Any) -> Poll[TaskResult]: ...
