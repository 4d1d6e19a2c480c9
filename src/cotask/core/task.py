# src/cotask/core/task.py

from __future__ import annotations

"""
Task base class and leaf tasks.

A Task is an explicit state machine:
- `state` is a member of the task type's IntEnum (START ... COMPLETED, FAILED),
- `advance()` runs exactly one synchronous segment and returns Pending or Ready(result),
- the result is write-once; advancing a finished task raises InvalidStateError.

Subclasses implement `_step()` and move through their states with `_move_to()`.
"""

import logging
from enum import IntEnum
from typing import Any

from .errors import InvalidStateError, OperationFailure
from .signals import Failure, Pending, Poll, Ready, Success, TaskResult

logger = logging.getLogger(__name__)


class Task:
    """Base class for every unit of suspendable work driven by the scheduler."""

    States: type[IntEnum]

    def __init__(self, name: str | None = None) -> None:
        self.name = name or type(self).__name__
        self.state = self.States.START
        self.polls = 0
        self.result: TaskResult | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} state={self.state.name} polls={self.polls}>"

    @property
    def is_terminal(self) -> bool:
        return self.result is not None

    def advance(self) -> Poll[TaskResult]:
        if self.result is not None:
            raise InvalidStateError(
                f"{self.name}: advance() called in terminal state {self.state.name}"
            )

        self.polls += 1
        try:
            signal = self._step()
        except OperationFailure as exc:
            signal = Ready(Failure(exc.kind, exc.detail))

        if isinstance(signal, Ready):
            self._finish(signal.value)
        elif signal is not Pending:
            raise TypeError(f"{self.name}: _step() returned {signal!r}, expected Ready or Pending")
        return signal

    def _step(self) -> Poll[TaskResult]:
        raise NotImplementedError

    def _move_to(self, new_state: IntEnum) -> None:
        # Transitions only go forward; each suspension site is visited at most once.
        if new_state <= self.state:
            raise InvalidStateError(
                f"{self.name}: illegal transition {self.state.name} -> {new_state.name}"
            )
        self.state = new_state

    def _finish(self, result: Any) -> None:
        if isinstance(result, Success):
            self._move_to(self.States.COMPLETED)
        elif isinstance(result, Failure):
            self._move_to(self.States.FAILED)
        else:
            raise TypeError(f"{self.name}: resolved with {result!r}, expected Success or Failure")
        self.result = result
        logger.debug("Task %s resolved after %d polls: %s", self.name, self.polls, result)


def advance(task: Task) -> Poll[TaskResult]:
    """Function form of `Task.advance`."""
    return task.advance()


class ReadyState(IntEnum):
    START = 0
    COMPLETED = 1
    FAILED = 2


class ReadyTask(Task):
    """Resolves on its first poll (no suspension points)."""

    States = ReadyState

    def __init__(self, value: Any = None, *, name: str | None = None) -> None:
        super().__init__(name)
        self._value = value

    def _step(self) -> Poll[TaskResult]:
        return Ready(Success(self._value))


class SleepState(IntEnum):
    START = 0
    SLEEPING = 1
    COMPLETED = 2
    FAILED = 3


class SleepTask(Task):
    """
    Waits for a number of scheduler turns, then resolves with Success(None).

    `turns` suspension points -> `turns + 1` polls. The engine has no clock,
    so "how long" is always measured in polls.
    """

    States = SleepState

    def __init__(self, turns: int, *, name: str | None = None) -> None:
        if turns < 0:
            raise ValueError("turns must be >= 0")
        super().__init__(name or f"sleep({turns})")
        self.turns = int(turns)
        self._remaining = self.turns

    def _step(self) -> Poll[TaskResult]:
        if self.state is SleepState.START:
            self._move_to(SleepState.SLEEPING)

        if self._remaining == 0:
            return Ready(Success(None))
        self._remaining -= 1
        return Pending


def ready(value: Any = None, *, name: str | None = None) -> ReadyTask:
    return ReadyTask(value, name=name)


def sleep_turns(turns: int, *, name: str | None = None) -> SleepTask:
    return SleepTask(turns, name=name)
