# tests/conftest.py

from __future__ import annotations

import os

import pytest

from cotask import Scheduler
from cotask.config import Settings


@pytest.fixture()
def scheduler() -> Scheduler:
    return Scheduler(name="test")


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """
    Settings built from a clean environment.

    We strip COTASK_* variables so a developer's local .env or shell does
    not leak into unit tests.
    """
    for key in list(os.environ):
        if key.startswith("COTASK_"):
            monkeypatch.delenv(key, raising=False)
    return Settings.from_env()
