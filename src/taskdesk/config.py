# src/taskdesk/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Storage key names are NOT configurable: they must stay stable across versions
  or existing data is orphaned.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDESK"

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


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_dir: Path
    session_dir: Path
    log_dir: Path

    # ---- Behaviour tuning ----
    latency_scale: float
    upcoming_window_hours: int
    deadline_check_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdesk") or "taskdesk"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdesk"))
        store_dir = _env_path(_k("STORE_DIR"), data_dir / "store")
        session_dir = _env_path(_k("SESSION_DIR"), data_dir / "session")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        # 1.0 reproduces the simulated network round-trips, 0 disables them.
        latency_scale = max(0.0, _env_float(_k("LATENCY_SCALE"), 1.0))
        upcoming_window_hours = max(1, _env_int(_k("UPCOMING_WINDOW_HOURS"), 24))
        deadline_check_interval_seconds = max(
            1.0, _env_float(_k("DEADLINE_CHECK_INTERVAL_SECONDS"), 60.0)
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            store_dir=store_dir,
            session_dir=session_dir,
            log_dir=log_dir,
            latency_scale=latency_scale,
            upcoming_window_hours=upcoming_window_hours,
            deadline_check_interval_seconds=deadline_check_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
