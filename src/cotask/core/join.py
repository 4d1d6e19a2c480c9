# src/cotask/core/join.py

from __future__ import annotations

"""
Join combinator.

join([a, b, c]) is itself a Task:
- every advance polls each unfinished child once, in index order,
- results land in the slot of their child, whatever order they finish in,
- the first Failure (lowest index) ends the join and the remaining children
  are dropped without another poll.
"""

import logging
from collections.abc import Iterable
from enum import IntEnum
from typing import Any

from .signals import Failure, Pending, Poll, Ready, Success, TaskResult
from .task import Task

logger = logging.getLogger(__name__)


class JoinState(IntEnum):
    START = 0
    RUNNING = 1
    COMPLETED = 2
    FAILED = 3


class JoinTask(Task):
    States = JoinState

    def __init__(self, tasks: Iterable[Task], *, name: str = "join") -> None:
        children = list(tasks)
        for child in children:
            if not isinstance(child, Task):
                raise TypeError(f"join() expects Task instances, got {child!r}")
        super().__init__(name)
        self._children: list[Task] = children
        self._slots: list[TaskResult | None] = [None] * len(children)

    @property
    def completed(self) -> tuple[bool, ...]:
        return tuple(slot is not None for slot in self._slots)

    @property
    def slots(self) -> tuple[TaskResult | None, ...]:
        return tuple(self._slots)

    def _step(self) -> Poll[TaskResult]:
        if self.state is JoinState.START:
            self._move_to(JoinState.RUNNING)

        for index, child in enumerate(self._children):
            if self._slots[index] is not None:
                continue

            signal = child.advance()
            if signal is Pending:
                continue

            result = signal.value
            self._slots[index] = result
            if isinstance(result, Failure):
                logger.debug(
                    "Join %s: child %d (%s) failed, abandoning %d pending children",
                    self.name,
                    index,
                    child.name,
                    self._slots.count(None),
                )
                return Ready(result)

        if any(slot is None for slot in self._slots):
            return Pending
        return Ready(Success([slot.value for slot in self._slots]))

    def _finish(self, result: Any) -> None:
        super()._finish(result)
        self._children = []


def join(tasks: Iterable[Task], *, name: str = "join") -> JoinTask:
    return JoinTask(tasks, name=name)
