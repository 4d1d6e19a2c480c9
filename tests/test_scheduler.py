# tests/test_scheduler.py

from __future__ import annotations

import pytest

from cotask import (
    Failure,
    InvalidStateError,
    Plan,
    Scheduler,
    SchedulerStalledError,
    Success,
    await_,
    checkpoint,
    compute,
    ready,
)

from .fakes import ScriptedTask


def test_round_robin_gives_equal_progress(scheduler: Scheduler) -> None:
    a = ScriptedTask(4, Success("a"))  # needs 5 polls
    b = ScriptedTask(4, Success("b"))
    scheduler.submit(a)
    scheduler.submit(b)

    for turn in range(1, 6):
        assert scheduler.run_turn() == 2
        assert a.polls == b.polls == turn

    assert scheduler.is_idle
    assert scheduler.turns == 5


def test_fifo_order_within_each_turn(scheduler: Scheduler) -> None:
    trace: list[str] = []

    def traced(name: str) -> Plan:
        return Plan(
            f"traced_{name}",
            [
                compute(lambda: trace.append(f"{name}1")),
                checkpoint(),
                compute(lambda: trace.append(f"{name}2")),
            ],
        )

    scheduler.submit(traced("a").bind())
    scheduler.submit(traced("b").bind())
    scheduler.run_until_all_complete()

    assert trace == ["a1", "b1", "a2", "b2"]


def test_submit_does_not_advance(scheduler: Scheduler) -> None:
    task = ScriptedTask(0)
    handle = scheduler.submit(task)

    assert task.polls == 0
    assert scheduler.pending_count == 1
    assert scheduler.result(handle) is None
    assert handle.name == task.name


def test_run_until_all_complete_returns_every_result(scheduler: Scheduler) -> None:
    h1 = scheduler.submit(ScriptedTask(0, Success(1)))
    h2 = scheduler.submit(ScriptedTask(3, Failure("nope")))
    h3 = scheduler.submit(ScriptedTask(1, Success(3)))

    results = scheduler.run_until_all_complete()

    assert results == {h1: Success(1), h2: Failure("nope"), h3: Success(3)}
    assert scheduler.is_idle
    assert scheduler.collect_results() == {}


def test_run_to_completion_keeps_servicing_other_tasks(scheduler: Scheduler) -> None:
    background = ScriptedTask(10, Success("bg"))
    handle = scheduler.submit(background)

    result = scheduler.run_to_completion(ScriptedTask(2, Success("fg")))

    assert result == Success("fg")
    assert background.polls == 3
    assert scheduler.pending_count == 1
    assert scheduler.run_until_all_complete() == {handle: Success("bg")}


def test_invalid_state_error_aborts_the_run(scheduler: Scheduler) -> None:
    finished = ready(1)
    finished.advance()
    broken = Plan("reuses_finished_child", [await_(lambda: finished)]).bind()

    scheduler.submit(ScriptedTask(5))
    scheduler.submit(broken)

    with pytest.raises(InvalidStateError):
        scheduler.run_until_all_complete()


def test_submitting_a_finished_task_is_rejected(scheduler: Scheduler) -> None:
    task = ready(1)
    task.advance()
    with pytest.raises(InvalidStateError):
        scheduler.submit(task)

    with pytest.raises(TypeError):
        scheduler.submit("not a task")  # type: ignore[arg-type]


def test_cancel_abandons_without_another_poll(scheduler: Scheduler) -> None:
    task = ScriptedTask(10)
    handle = scheduler.submit(task)
    scheduler.run_turn()

    assert scheduler.cancel(handle) is True
    assert scheduler.cancel(handle) is False
    assert scheduler.take_result(handle) == Failure("cancelled", f"{task.name} was cancelled")

    scheduler.run_until_all_complete()
    assert task.polls == 1
    assert not task.is_terminal


def test_deadline_turns_times_out_pending_task(scheduler: Scheduler) -> None:
    slow = ScriptedTask(10)
    fast = ScriptedTask(1, Success("fast"))
    slow_handle = scheduler.submit(slow, deadline_turns=3)
    fast_handle = scheduler.submit(fast, deadline_turns=3)

    results = scheduler.run_until_all_complete()

    assert results[fast_handle] == Success("fast")
    assert results[slow_handle].kind == "timeout"
    assert slow.polls == 3


def test_deadline_must_be_positive(scheduler: Scheduler) -> None:
    with pytest.raises(ValueError):
        scheduler.submit(ScriptedTask(0), deadline_turns=0)


def test_turn_limit_stops_runaway_runs() -> None:
    scheduler = Scheduler(turn_limit=2)
    scheduler.submit(ScriptedTask(5))

    with pytest.raises(SchedulerStalledError):
        scheduler.run_until_all_complete()
    assert scheduler.turns == 2


def test_zero_turn_limit_means_unbounded() -> None:
    scheduler = Scheduler(turn_limit=0)
    assert scheduler.run_to_completion(ScriptedTask(50, Success("done"))) == Success("done")


def test_turn_limit_applies_to_each_run_not_the_scheduler_lifetime() -> None:
    scheduler = Scheduler(turn_limit=5)

    # 3 turns each; together they exceed the limit, separately they don't
    assert scheduler.run_to_completion(ScriptedTask(2, Success("first"))) == Success("first")
    assert scheduler.run_to_completion(ScriptedTask(2, Success("second"))) == Success("second")
    scheduler.submit(ScriptedTask(2))
    scheduler.run_until_all_complete()
    assert scheduler.turns == 9

    with pytest.raises(SchedulerStalledError):
        scheduler.run_to_completion(ScriptedTask(5))
    assert scheduler.turns == 14


def test_same_task_cannot_be_queued_twice(scheduler: Scheduler) -> None:
    task = ScriptedTask(2, Success("once"))
    handle = scheduler.submit(task)

    with pytest.raises(InvalidStateError):
        scheduler.submit(task)

    scheduler.run_turn()
    assert task.polls == 1
    assert scheduler.run_until_all_complete() == {handle: Success("once")}


def test_cancelled_task_can_be_submitted_again(scheduler: Scheduler) -> None:
    task = ScriptedTask(1, Success("again"))
    scheduler.cancel(scheduler.submit(task))

    assert scheduler.run_to_completion(task) == Success("again")


def test_timeout_reports_the_deadline(scheduler: Scheduler) -> None:
    task = ScriptedTask(10, name="slow")
    handle = scheduler.submit(task, deadline_turns=2)

    results = scheduler.run_until_all_complete()

    assert results[handle] == Failure("timeout", "slow not resolved within 2 turns")


def test_run_to_completion_propagates_advance_errors(scheduler: Scheduler) -> None:
    broken = Plan("divides_by_zero", [compute(lambda: 1 // 0)]).bind()

    with pytest.raises(ZeroDivisionError):
        scheduler.run_to_completion(broken)
    assert scheduler.is_idle
