# src/cotask/core/plan.py

"""
Plan construction API.

A Plan is an ordered list of steps compiled once into a task type:

- compute(fn, reads, writes): synchronous work inside a segment
- await_(factory, reads, into): a suspension point awaiting a child task
- checkpoint(): an unconditional suspension point

Compilation fixes the state graph (START, one state per await site,
COMPLETED, FAILED) and computes which variables are live across each await
site. Only those variables are kept in a suspended task's captured
environment; everything else is dropped when its segment ends.

Example:

    doubled = Plan(
        "double_after_fetch",
        [
            await_(lambda op: op, reads="op", into="value"),
            compute(lambda value: value * 2, reads="value", writes="doubled"),
        ],
        params=("op",),
        returns="doubled",
    )
    task = doubled.bind(op=some_task)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Union

from .errors import PlanError
from .signals import Failure, Pending, Poll, Ready, Success, TaskResult
from .task import Task, sleep_turns

logger = logging.getLogger(__name__)

Names = Union[str, Iterable[str]]


def _names(raw: Names | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    return tuple(raw)


def _ident(text: str) -> str:
    return re.sub(r"[^0-9A-Za-z]+", "_", text).strip("_").upper() or "STEP"


@dataclass(slots=True, frozen=True)
class Compute:
    fn: Callable[..., Any]
    reads: tuple[str, ...] = ()
    writes: tuple[str, ...] = ()
    label: str | None = None


@dataclass(slots=True, frozen=True)
class Await:
    factory: Callable[..., Task]
    reads: tuple[str, ...] = ()
    into: str | None = None
    label: str | None = None


Step = Union[Compute, Await]


def compute(
        fn: Callable[..., Any],
        reads: Names | None = None,
        writes: Names | None = None,
        *,
        label: str | None = None,
) -> Compute:
    """
    Synchronous step. `fn(**reads)` returns:
    - nothing useful when there are no writes,
    - the value when there is one write,
    - a tuple with one item per write otherwise,
    - or a Failure, which ends the task.
    """
    return Compute(fn=fn, reads=_names(reads), writes=_names(writes), label=label)


def await_(
        factory: Callable[..., Task],
        reads: Names | None = None,
        into: str | None = None,
        *,
        label: str | None = None,
) -> Await:
    """Suspension point: `factory(**reads)` builds the child task to await."""
    return Await(factory=factory, reads=_names(reads), into=into, label=label)


def checkpoint(label: str | None = None) -> Await:
    """Yield to the scheduler once."""
    return Await(factory=lambda: sleep_turns(1), label=label or "checkpoint")


class Plan:
    """
    A compiled sequence of segments and await sites.

    Construction raises PlanError for reads of names that no earlier step
    (or parameter) defines, and for a `returns` name that is never defined.
    """

    def __init__(
            self,
            name: str,
            steps: Sequence[Step],
            *,
            params: Iterable[str] = (),
            returns: str | None = None,
    ) -> None:
        self.name = name
        self.params: tuple[str, ...] = _names(params)
        self.returns = returns

        if len(set(self.params)) != len(self.params):
            raise PlanError(f"{name}: duplicate parameter names {self.params}")

        segments: list[list[Compute]] = [[]]
        sites: list[Await] = []
        for step in steps:
            if isinstance(step, Compute):
                segments[-1].append(step)
            elif isinstance(step, Await):
                sites.append(step)
                segments.append([])
            else:
                raise PlanError(f"{name}: unsupported step {step!r}")

        self.segments: tuple[tuple[Compute, ...], ...] = tuple(tuple(s) for s in segments)
        self.sites: tuple[Await, ...] = tuple(sites)
        self._steps: tuple[Step, ...] = tuple(steps)

        self._check_definitions()
        self._live: tuple[frozenset[str], ...] = self._compute_liveness()
        self.states: type[IntEnum] = self._build_states()

        logger.debug(
            "Compiled plan %s: %d await sites, live sets %s",
            name,
            len(self.sites),
            [sorted(s) for s in self._live],
        )

    def __repr__(self) -> str:
        return f"<Plan {self.name!r} sites={len(self.sites)}>"

    def __call__(self, **params: Any) -> PlanTask:
        return self.bind(**params)

    @property
    def suspension_points(self) -> int:
        return len(self.sites)

    def live_across(self, site_index: int) -> frozenset[str]:
        """Names held in the captured environment while suspended at await site `site_index`."""
        return self._live[site_index]

    def bind(self, **params: Any) -> PlanTask:
        missing = [p for p in self.params if p not in params]
        unexpected = [p for p in params if p not in self.params]
        if missing or unexpected:
            raise PlanError(
                f"{self.name}: bad parameters (missing={missing}, unexpected={unexpected})"
            )
        return PlanTask(self, params)

    # ---- compilation ----

    def _check_definitions(self) -> None:
        defined = set(self.params)
        for position, step in enumerate(self._steps):
            label = step.label or f"step {position}"
            unbound = [n for n in step.reads if n not in defined]
            if unbound:
                raise PlanError(f"{self.name}: {label} reads undefined names {unbound}")
            if isinstance(step, Compute):
                defined.update(step.writes)
            elif step.into is not None:
                defined.add(step.into)

        if self.returns is not None and self.returns not in defined:
            raise PlanError(f"{self.name}: returns undefined name {self.returns!r}")

    def _compute_liveness(self) -> tuple[frozenset[str], ...]:
        # Backward pass: a name is live after a point if a later step reads it
        # before any later step rebinds it.
        live: set[str] = {self.returns} if self.returns is not None else set()
        per_site: list[frozenset[str]] = []

        for step in reversed(self._steps):
            if isinstance(step, Compute):
                live.difference_update(step.writes)
                live.update(step.reads)
            else:
                if step.into is not None:
                    live.discard(step.into)
                per_site.append(frozenset(live))
                live.update(step.reads)

        per_site.reverse()
        return tuple(per_site)

    def _build_states(self) -> type[IntEnum]:
        members = [("START", 0)]
        for index, site in enumerate(self.sites, start=1):
            suffix = f"_{_ident(site.label)}" if site.label else ""
            members.append((f"AWAIT_{index}{suffix}", index))
        members.append(("COMPLETED", len(self.sites) + 1))
        members.append(("FAILED", len(self.sites) + 2))
        return IntEnum(f"{_ident(self.name).title().replace('_', '')}State", members)


class PlanTask(Task):
    """One running instance of a Plan."""

    def __init__(self, plan: Plan, params: Mapping[str, Any]) -> None:
        self.States = plan.states
        super().__init__(plan.name)
        self.plan = plan
        self._env: dict[str, Any] = dict(params)
        self._segment = 0
        self._child: Task | None = None

    @property
    def env(self) -> Mapping[str, Any]:
        """Read-only view of the captured environment."""
        return MappingProxyType(dict(self._env))

    def _step(self) -> Poll[TaskResult]:
        scope = dict(self._env)

        if self._child is not None:
            signal = self._child.advance()
            if signal is Pending:
                return Pending
            resumed = self._resume(signal.value, scope)
            if resumed is not None:
                return self._done(resumed)

        return self._run(scope)

    def _resume(self, result: TaskResult, scope: dict[str, Any]) -> Failure | None:
        site = self.plan.sites[self._segment]
        self._child = None
        if isinstance(result, Failure):
            return result
        if site.into is not None:
            scope[site.into] = result.value
        self._segment += 1
        return None

    def _run(self, scope: dict[str, Any]) -> Poll[TaskResult]:
        plan = self.plan
        while True:
            for step in plan.segments[self._segment]:
                out = step.fn(**{n: scope[n] for n in step.reads})
                if isinstance(out, Failure):
                    return self._done(out)
                self._bind(step, out, scope)

            if self._segment == len(plan.sites):
                value = scope[plan.returns] if plan.returns is not None else None
                return self._done(Success(value))

            site = plan.sites[self._segment]
            child = site.factory(**{n: scope[n] for n in site.reads})
            if not isinstance(child, Task):
                raise PlanError(f"{plan.name}: await factory returned {child!r}, expected a Task")

            signal = child.advance()
            if signal is Pending:
                self._child = child
                self._env = {n: scope[n] for n in plan.live_across(self._segment)}
                self._move_to(self.States(self._segment + 1))
                return Pending

            failed = self._resume(signal.value, scope)
            if failed is not None:
                return self._done(failed)

    def _bind(self, step: Compute, out: Any, scope: dict[str, Any]) -> None:
        if not step.writes:
            return
        if len(step.writes) == 1:
            scope[step.writes[0]] = out
            return
        if not isinstance(out, tuple) or len(out) != len(step.writes):
            raise PlanError(
                f"{self.plan.name}: {step.label or 'compute step'} must return "
                f"a {len(step.writes)}-tuple for writes {step.writes}, got {out!r}"
            )
        scope.update(zip(step.writes, out))

    def _done(self, result: TaskResult) -> Ready[TaskResult]:
        return Ready(result)

    def _finish(self, result: Any) -> None:
        super()._finish(result)
        # Finished tasks keep nothing alive.
        self._env = {}
        self._child = None
