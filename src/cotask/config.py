# src/cotask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the host program (scheduler limits, logging, HTTP).
- The engine core never reads settings itself; callers pass values in.
- Nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "COTASK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Optional[Path]

    # ---- Scheduler ----
    turn_limit: int  # 0 = unbounded

    # ---- HTTP collaborator ----
    http_connect_timeout: float
    http_read_timeout: float
    http_workers: int
    http_follow_redirects: bool

    # ---- Demos ----
    demo_url: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "cotask").strip() or "cotask"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_dir = _env_path(_k("LOG_DIR"), None)

        turn_limit = max(0, _env_int(_k("TURN_LIMIT"), 0))

        # Matches the 10s client timeout of the original HTTP example.
        http_read_timeout = _env_float(_k("HTTP_READ_TIMEOUT_SECONDS"), 10.0)
        http_connect_timeout = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)
        http_workers = max(1, _env_int(_k("HTTP_WORKERS"), 4))
        http_follow_redirects = _env_bool(_k("HTTP_FOLLOW_REDIRECTS"), True)

        demo_url = _env(_k("DEMO_URL"), "https://api.github.com/repos/rust-lang/rust").strip()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            turn_limit=turn_limit,
            http_connect_timeout=http_connect_timeout,
            http_read_timeout=http_read_timeout,
            http_workers=http_workers,
            http_follow_redirects=http_follow_redirects,
            demo_url=demo_url,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
