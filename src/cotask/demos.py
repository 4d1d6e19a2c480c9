# src/cotask/demos.py

"""
Demo programs expressed as plans.

Each demo mirrors a classic async example (state machine with one await,
several awaits, variables living across an await, error results, an HTTP
fetch, concurrent join) and can be run on any Scheduler:

    scheduler = Scheduler()
    result = scheduler.run_to_completion(variable_scoping_demo())
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .core.external import external
from .core.join import join
from .core.plan import Plan, await_, compute
from .core.ports import ExternalCollaborator
from .core.signals import Failure
from .core.task import Task, sleep_turns

logger = logging.getLogger(__name__)


def _say(message: str, *reads: str) -> Callable[..., None]:
    """Step function logging `message` formatted with the values it reads."""

    def step(**values: Any) -> None:
        logger.info(message, *(values[name] for name in reads))

    return step


STATE_MACHINE = Plan(
    "state_machine",
    [
        compute(_say("Starting async state machine...")),
        compute(time.monotonic, writes="start_time"),
        await_(lambda: sleep_turns(3), label="sleep"),
        compute(lambda start_time: time.monotonic() - start_time, reads="start_time", writes="elapsed"),
        compute(_say("Completed after %.6fs", "elapsed"), reads="elapsed"),
    ],
    returns="elapsed",
)


MULTIPLE_AWAITS = Plan(
    "multiple_awaits",
    [
        compute(_say("Starting task with multiple awaits...")),
        compute(_say("Awaiting first operation...")),
        await_(lambda: sleep_turns(2), label="first"),
        compute(_say("First operation completed")),
        compute(_say("Awaiting second operation...")),
        await_(lambda: sleep_turns(2), label="second"),
        compute(_say("Second operation completed")),
        compute(_say("Awaiting third operation...")),
        await_(lambda: sleep_turns(2), label="third"),
        compute(_say("Third operation completed")),
        compute(_say("All operations finished!")),
    ],
)


# important_value is read after the await and is captured; temporary_value is
# only used before it and is dropped with its segment.
VARIABLE_SCOPING = Plan(
    "variable_scoping",
    [
        compute(_say("Demonstrating variable scoping across awaits...")),
        compute(lambda: 42, writes="important_value"),
        compute(_say("Before await: important_value = %s", "important_value"), reads="important_value"),
        compute(lambda: "temporary", writes="temporary_value"),
        compute(_say("Temporary value: %s", "temporary_value"), reads="temporary_value"),
        await_(lambda: sleep_turns(1), label="sleep"),
        compute(_say("After await: important_value = %s", "important_value"), reads="important_value"),
        compute(lambda important_value: important_value * 2, reads="important_value", writes="result"),
        compute(_say("Computed result: %s", "result"), reads="result"),
    ],
    returns="result",
)


def _validate_request_id(request_id: int) -> Failure | None:
    if request_id == 0:
        return Failure("invalid_id", "Invalid ID: cannot be zero")
    return None


PROCESS_REQUEST = Plan(
    "process_request",
    [
        compute(
            _say("Processing request with id: %s, data: %s", "request_id", "data"),
            reads=("request_id", "data"),
        ),
        await_(lambda: sleep_turns(1), label="validate"),
        compute(_validate_request_id, reads="request_id"),
        await_(lambda: sleep_turns(1), label="process"),
        compute(
            lambda request_id, data: f"Processed(id={request_id}, data={data})",
            reads=("request_id", "data"),
            writes="processed_data",
        ),
        await_(lambda: sleep_turns(1), label="finalize"),
    ],
    params=("request_id", "data"),
    returns="processed_data",
)


FETCH_THEN_COMPUTE = Plan(
    "fetch_then_compute",
    [
        await_(
            lambda collaborator, request: external(collaborator, request),
            reads=("collaborator", "request"),
            into="fetched",
            label="fetch",
        ),
        compute(lambda fetched: fetched * 2, reads="fetched", writes="doubled"),
    ],
    params=("collaborator", "request"),
    returns="doubled",
)


FETCH_DATA = Plan(
    "fetch_data",
    [
        compute(_say("Fetching data from: %s", "url"), reads="url"),
        await_(lambda fetcher, url: fetcher.fetch(url), reads=("fetcher", "url"), into="body", label="get"),
        compute(lambda body: logger.info("Successfully fetched %d bytes", len(body)), reads="body"),
    ],
    params=("fetcher", "url"),
    returns="body",
)


NUMBERED = Plan(
    "numbered",
    [
        await_(lambda turns: sleep_turns(turns), reads="turns", label="sleep"),
        compute(_say("Task %s completed", "number"), reads="number"),
    ],
    params=("number", "turns"),
    returns="number",
)


def _concurrent_children() -> Task:
    # Different lengths, so children finish out of order: 2, 3, then 1.
    return join(
        [
            NUMBERED.bind(number=1, turns=4),
            NUMBERED.bind(number=2, turns=2),
            NUMBERED.bind(number=3, turns=3),
        ],
        name="concurrent_children",
    )


CONCURRENT = Plan(
    "concurrent",
    [
        compute(_say("Starting concurrent tasks...")),
        await_(_concurrent_children, into="results", label="join"),
        compute(lambda results: sum(results), reads="results", writes="total"),
        compute(
            lambda results, total: logger.info(
                "All tasks completed: %s = %s", " + ".join(str(r) for r in results), total
            ),
            reads=("results", "total"),
        ),
    ],
    returns="total",
)


SUGAR = Plan(
    "sugar",
    [
        await_(lambda: sleep_turns(1), label="sleep"),
        compute(lambda: 42, writes="answer"),
    ],
    returns="answer",
)


def state_machine_demo() -> Task:
    return STATE_MACHINE.bind()


def multiple_awaits_demo() -> Task:
    return MULTIPLE_AWAITS.bind()


def variable_scoping_demo() -> Task:
    return VARIABLE_SCOPING.bind()


def process_request(request_id: int, data: str) -> Task:
    return PROCESS_REQUEST.bind(request_id=request_id, data=data)


def fetch_then_compute(collaborator: ExternalCollaborator, request: Any) -> Task:
    return FETCH_THEN_COMPUTE.bind(collaborator=collaborator, request=request)


def fetch_data(fetcher: Any, url: str) -> Task:
    """`fetcher` is anything with `fetch(url) -> Task`, e.g. HttpFetcher."""
    return FETCH_DATA.bind(fetcher=fetcher, url=url)


def concurrent_demo() -> Task:
    return CONCURRENT.bind()


def sugar_demo() -> Task:
    return SUGAR.bind()


# Offline demos runnable by name from the CLI.
DEMOS: dict[str, Callable[[], Task]] = {
    "state_machine": state_machine_demo,
    "multiple_awaits": multiple_awaits_demo,
    "variable_scoping": variable_scoping_demo,
    "process_request": lambda: process_request(42, "test-data"),
    "concurrent": concurrent_demo,
    "sugar": sugar_demo,
}
