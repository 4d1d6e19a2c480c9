# src/cotask/core/errors.py

"""Engine exceptions.

Programming defects (bad plans, advancing finished tasks) are raised and must
propagate. Legitimate failed outcomes travel as `Failure` data instead; see
`OperationFailure` for the bridge from user code.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for engine defects."""


class InvalidStateError(EngineError):
    """A task was advanced after it reached a terminal state, or moved backwards."""


class PlanError(EngineError):
    """A plan cannot be compiled or bound (unbound reads, bad params)."""


class SchedulerStalledError(EngineError):
    """The scheduler ran past its configured turn limit."""


class OperationFailure(Exception):
    """
    Raised by segment functions and collaborators to report a failed outcome.

    Never escapes a task: the task converts it into `Failure(kind, detail)`.
    """

    def __init__(self, kind: str, detail: str = "") -> None:
        super().__init__(f"{kind}: {detail}" if detail else kind)
        self.kind = kind
        self.detail = detail
