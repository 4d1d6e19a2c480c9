# tests/test_demos.py

from __future__ import annotations

import logging

import pytest

from cotask import Failure, Scheduler, Success
from cotask.demos import (
    DEMOS,
    PROCESS_REQUEST,
    VARIABLE_SCOPING,
    concurrent_demo,
    fetch_data,
    multiple_awaits_demo,
    process_request,
    state_machine_demo,
    sugar_demo,
    variable_scoping_demo,
)

from .fakes import FakeFetcher


def test_variable_scoping_captures_only_the_live_value(scheduler: Scheduler) -> None:
    assert VARIABLE_SCOPING.live_across(0) == frozenset({"important_value"})

    task = variable_scoping_demo()
    task.advance()
    assert dict(task.env) == {"important_value": 42}

    assert scheduler.run_to_completion(task) == Success(84)


def test_process_request_success(scheduler: Scheduler) -> None:
    result = scheduler.run_to_completion(process_request(42, "test"))

    assert result == Success("Processed(id=42, data=test)")
    assert PROCESS_REQUEST.suspension_points == 3


def test_process_request_rejects_zero_id(scheduler: Scheduler) -> None:
    task = process_request(0, "test")
    result = scheduler.run_to_completion(task)

    assert result == Failure("invalid_id", "Invalid ID: cannot be zero")
    assert task.polls == 2


def test_concurrent_demo_sums_children_in_order(scheduler: Scheduler, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="cotask.demos")

    assert scheduler.run_to_completion(concurrent_demo()) == Success(6)

    completed = [r.getMessage() for r in caplog.records if r.getMessage().endswith("completed")]
    assert completed == ["Task 2 completed", "Task 3 completed", "Task 1 completed"]
    assert "All tasks completed: 1 + 2 + 3 = 6" in caplog.messages


def test_multiple_awaits_logs_every_step(scheduler: Scheduler, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="cotask.demos")
    task = multiple_awaits_demo()

    assert scheduler.run_to_completion(task) == Success(None)
    assert caplog.messages[-1] == "All operations finished!"
    assert task.polls == 7


def test_state_machine_and_sugar(scheduler: Scheduler) -> None:
    elapsed = scheduler.run_to_completion(state_machine_demo())
    assert isinstance(elapsed, Success) and elapsed.value >= 0

    assert scheduler.run_to_completion(sugar_demo()) == Success(42)


def test_fetch_data_with_fake_fetcher(scheduler: Scheduler) -> None:
    fetcher = FakeFetcher({"https://example.test/": "hello"})

    assert scheduler.run_to_completion(fetch_data(fetcher, "https://example.test/")) == Success("hello")
    assert scheduler.run_to_completion(fetch_data(fetcher, "https://example.test/404")) == Failure(
        "http_status", "HTTP error: 404"
    )


def test_all_demos_run_concurrently_on_one_scheduler(scheduler: Scheduler) -> None:
    handles = {name: scheduler.submit(factory()) for name, factory in DEMOS.items()}

    results = scheduler.run_until_all_complete()

    assert set(results) == set(handles.values())
    assert all(result.ok for result in results.values())
    assert results[handles["variable_scoping"]] == Success(84)
    assert results[handles["concurrent"]] == Success(6)
