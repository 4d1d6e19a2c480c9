"""cotask: a small cooperative task engine.

Tasks are explicit state machines that suspend by returning Pending and are
resumed by an explicitly constructed Scheduler. `join` runs several tasks
concurrently and collects their results in order.
"""

from cotask.core.errors import (
    EngineError,
    InvalidStateError,
    OperationFailure,
    PlanError,
    SchedulerStalledError,
)
from cotask.core.external import ExternalOperation, external
from cotask.core.join import JoinTask, join
from cotask.core.plan import Plan, PlanTask, await_, checkpoint, compute
from cotask.core.ports import ExternalCollaborator
from cotask.core.scheduler import Scheduler, TaskHandle
from cotask.core.signals import (
    Failure,
    Pending,
    Poll,
    Ready,
    Success,
    TaskResult,
    is_pending,
    is_ready,
)
from cotask.core.task import ReadyTask, SleepTask, Task, advance, ready, sleep_turns

__version__ = "0.1.0"

__all__ = [
    "EngineError",
    "ExternalCollaborator",
    "ExternalOperation",
    "Failure",
    "InvalidStateError",
    "JoinTask",
    "OperationFailure",
    "Pending",
    "Plan",
    "PlanError",
    "PlanTask",
    "Poll",
    "Ready",
    "ReadyTask",
    "Scheduler",
    "SchedulerStalledError",
    "SleepTask",
    "Success",
    "Task",
    "TaskHandle",
    "TaskResult",
    "advance",
    "await_",
    "checkpoint",
    "compute",
    "external",
    "is_pending",
    "is_ready",
    "join",
    "ready",
    "sleep_turns",
]
