# src/cotask/core/scheduler.py

from __future__ import annotations

"""
Cooperative round-robin scheduler.

A single-threaded loop that:
- keeps submitted tasks in a FIFO ready queue,
- advances each queued task once per turn,
- requeues tasks that return Pending, records results of tasks that finish,
- abandons tasks that are cancelled or run past their deadline.

Only one advance() runs at a time; control comes back to the scheduler only
when a task suspends or finishes. Errors raised by advance() (InvalidStateError
and any other defect) abort the run and propagate to the caller.
"""

import itertools
import logging
from collections import deque
from dataclasses import dataclass

from .errors import InvalidStateError, SchedulerStalledError
from .signals import Failure, Ready, TaskResult
from .task import Task

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TaskHandle:
    """Identifies one submission. Results are looked up by handle."""

    id: int
    name: str


@dataclass(slots=True)
class _Entry:
    handle: TaskHandle
    task: Task
    deadline: int | None
    deadline_turns: int | None


class Scheduler:
    """
    Drives tasks to completion.

    turn_limit bounds the number of turns one run (run_until_all_complete,
    run_to_completion, drive) may take; None or 0 means unbounded. Deadlines
    and turn limits are counted in turns, never wall-clock time.

    A task instance can be queued at most once at a time.
    """

    def __init__(self, *, name: str = "scheduler", turn_limit: int | None = None) -> None:
        self.name = name
        self.turn_limit = turn_limit or None
        self.turns = 0
        self._queue: deque[_Entry] = deque()
        self._results: dict[TaskHandle, TaskResult] = {}
        self._queued: set[int] = set()  # id() of tasks currently in _queue
        self._ids = itertools.count(1)

    def __repr__(self) -> str:
        return f"<Scheduler {self.name!r} queued={len(self._queue)} turns={self.turns}>"

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    @property
    def is_idle(self) -> bool:
        return not self._queue

    def submit(self, task: Task, *, deadline_turns: int | None = None) -> TaskHandle:
        """Enqueue a task without advancing it."""
        if not isinstance(task, Task):
            raise TypeError(f"submit() expects a Task, got {task!r}")
        if task.is_terminal:
            raise InvalidStateError(f"{task.name}: cannot submit a task that already finished")
        if id(task) in self._queued:
            raise InvalidStateError(f"{task.name}: task is already queued")
        if deadline_turns is not None and deadline_turns < 1:
            raise ValueError("deadline_turns must be >= 1")

        handle = TaskHandle(id=next(self._ids), name=task.name)
        deadline = None if deadline_turns is None else self.turns + int(deadline_turns)
        self._queue.append(
            _Entry(handle=handle, task=task, deadline=deadline, deadline_turns=deadline_turns)
        )
        self._queued.add(id(task))
        logger.debug("%s: submitted %s (deadline=%s)", self.name, handle, deadline)
        return handle

    def cancel(self, handle: TaskHandle) -> bool:
        """
        Abandon a queued task. It is dropped without another poll and its
        handle resolves to Failure("cancelled").
        """
        for entry in self._queue:
            if entry.handle == handle:
                self._queue.remove(entry)
                self._queued.discard(id(entry.task))
                self._results[handle] = Failure("cancelled", f"{handle.name} was cancelled")
                logger.info("%s: cancelled task %s", self.name, handle.name)
                return True
        return False

    def run_turn(self) -> int:
        """
        Advance every task queued at the start of the turn exactly once.
        Returns the number of tasks advanced.
        """
        self.turns += 1
        advanced = 0

        for _ in range(len(self._queue)):
            entry = self._queue.popleft()
            try:
                signal = entry.task.advance()
            except Exception:
                self._queued.discard(id(entry.task))
                logger.exception("%s: advance failed for task %s", self.name, entry.handle.name)
                raise
            advanced += 1

            if isinstance(signal, Ready):
                self._queued.discard(id(entry.task))
                self._results[entry.handle] = signal.value
                logger.debug(
                    "%s: task %s finished on turn %d: %s",
                    self.name,
                    entry.handle.name,
                    self.turns,
                    signal.value,
                )
                continue

            if entry.deadline is not None and self.turns >= entry.deadline:
                self._queued.discard(id(entry.task))
                self._results[entry.handle] = Failure(
                    "timeout",
                    f"{entry.handle.name} not resolved within {entry.deadline_turns} turns",
                )
                logger.info("%s: task %s timed out, abandoning", self.name, entry.handle.name)
                continue

            self._queue.append(entry)

        logger.debug("%s: turn %d advanced %d tasks", self.name, self.turns, advanced)
        return advanced

    def check_turn_limit(self, started_at: int) -> None:
        """Raise SchedulerStalledError once the run that began at turn `started_at` has used up turn_limit."""
        if self.turn_limit is not None and self.turns - started_at >= self.turn_limit:
            raise SchedulerStalledError(
                f"{self.name}: turn limit {self.turn_limit} reached with {len(self._queue)} tasks pending"
            )

    def run_until_all_complete(self) -> dict[TaskHandle, TaskResult]:
        """Drain the queue. Returns (and releases) every result not yet taken."""
        started_at = self.turns
        while self._queue:
            self.check_turn_limit(started_at)
            self.run_turn()
        return self.collect_results()

    def run_to_completion(self, task: Task) -> TaskResult:
        """
        Submit `task` and run turns until its result is available.

        Other queued tasks keep their round-robin share meanwhile and stay
        queued once this one finishes.
        """
        handle = self.submit(task)
        started_at = self.turns
        while handle not in self._results:
            self.check_turn_limit(started_at)
            self.run_turn()
        return self._results.pop(handle)

    def result(self, handle: TaskHandle) -> TaskResult | None:
        return self._results.get(handle)

    def take_result(self, handle: TaskHandle) -> TaskResult:
        return self._results.pop(handle)

    def collect_results(self) -> dict[TaskHandle, TaskResult]:
        results = dict(self._results)
        self._results.clear()
        return results
