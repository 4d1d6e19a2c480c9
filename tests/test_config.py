# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from cotask.config import Settings


def test_defaults(settings: Settings) -> None:
    assert settings.app_name == "cotask"
    assert settings.log_level == "INFO"
    assert settings.log_dir is None
    assert settings.turn_limit == 0
    assert settings.http_read_timeout == 10.0
    assert settings.http_workers == 4
    assert settings.http_follow_redirects is True


def test_env_overrides(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COTASK_LOG_LEVEL", "debug")
    monkeypatch.setenv("COTASK_LOG_DIR", "~/cotask-logs")
    monkeypatch.setenv("COTASK_TURN_LIMIT", "500")
    monkeypatch.setenv("COTASK_HTTP_READ_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("COTASK_HTTP_WORKERS", "0")
    monkeypatch.setenv("COTASK_HTTP_FOLLOW_REDIRECTS", "no")

    s = Settings.from_env()

    assert s.log_level == "DEBUG"
    assert s.log_dir == Path("~/cotask-logs").expanduser()
    assert s.turn_limit == 500
    assert s.http_read_timeout == 2.5
    assert s.http_workers == 1
    assert s.http_follow_redirects is False


def test_malformed_numbers_fall_back(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COTASK_TURN_LIMIT", "lots")
    monkeypatch.setenv("COTASK_HTTP_CONNECT_TIMEOUT_SECONDS", "soon")

    s = Settings.from_env()

    assert s.turn_limit == 0
    assert s.http_connect_timeout == 5.0
