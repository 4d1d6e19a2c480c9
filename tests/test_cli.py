# tests/test_cli.py

from __future__ import annotations

import pytest

from cotask import Scheduler
from cotask.cli import main as cli


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # main() reconfigures the root logger; keep pytest's handlers intact.
    monkeypatch.setattr(cli, "setup_logging", lambda **_: None)


def test_main_runs_selected_demos(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["sugar", "variable_scoping", "--skip-network"]) == 0

    out = capsys.readouterr().out
    assert "1. sugar:" in out
    assert "Result: 42" in out
    assert "Result: 84" in out
    assert "HTTP fetch" not in out


def test_main_shows_failed_request(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["process_request", "--skip-network", "--fail"]) == 0

    out = capsys.readouterr().out
    assert "Result: Processed(id=42, data=test-data)" in out
    assert "Error: invalid_id: Invalid ID: cannot be zero" in out


def test_unknown_demo_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["nope", "--skip-network"])
    assert exc.value.code == 2


def test_run_demos_collects_results(capsys: pytest.CaptureFixture[str]) -> None:
    results = cli.run_demos(Scheduler(), ["concurrent"], show_failure=True)

    assert results["concurrent"].ok
    assert not results["process_request_invalid"].ok
