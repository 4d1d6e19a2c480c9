# src/cotask/core/external.py

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

from .ports import ExternalCollaborator
from .signals import Failure, Pending, Poll, Ready, Success, TaskResult
from .task import Task

logger = logging.getLogger(__name__)


class ExternalState(IntEnum):
    START = 0
    IN_FLIGHT = 1
    COMPLETED = 2
    FAILED = 3


class ExternalOperation(Task):
    """
    Wraps a collaborator-driven operation as a task with one suspension point.

    First advance starts the operation and suspends; later advances poll the
    collaborator until it reports an outcome.
    """

    States = ExternalState

    def __init__(
            self,
            collaborator: ExternalCollaborator,
            request: Any,
            *,
            name: str | None = None,
    ) -> None:
        super().__init__(name or f"external({request!r})")
        self.collaborator = collaborator
        self.request = request
        self.handle: Any = None

    def _step(self) -> Poll[TaskResult]:
        if self.state is ExternalState.START:
            self.handle = self.collaborator.start(self.request)
            self._move_to(ExternalState.IN_FLIGHT)
            logger.debug("External operation %s started", self.name)
            return Pending

        signal = self.collaborator.poll(self.handle)
        if signal is Pending:
            return Pending

        result = signal.value
        if not isinstance(result, (Success, Failure)):
            raise TypeError(
                f"{self.name}: collaborator produced {result!r}, expected Success or Failure"
            )
        return Ready(result)

    def _finish(self, result: Any) -> None:
        super()._finish(result)
        self.handle = None


def external(collaborator: ExternalCollaborator, request: Any, *, name: str | None = None) -> ExternalOperation:
    return ExternalOperation(collaborator, request, name=name)
