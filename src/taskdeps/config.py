# src/taskdeps/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole library (normal "settings layer").
- Nothing is required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDEPS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env values never override variables already set in the environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_optional_seconds(name: str, default: float | None) -> float | None:
    """Empty, "none" or a non-positive number means "no timeout"."""
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in {"", "none", "off"}:
        return None
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else None


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

    # ---- Local data paths ----
    data_dir: Path
    tasks_db_path: Path
    log_dir: Path

    # ---- Store / engine ----
    store_timeout_seconds: float
    query_timeout_seconds: float | None
    verify_after_write: bool

    # ---- Layout ----
    layout_viewport_width: float
    layout_compact: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeps") or "taskdeps"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeps"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        store_timeout_seconds = _env_float(_k("STORE_TIMEOUT_SECONDS"), 30.0)
        query_timeout_seconds = _env_optional_seconds(_k("QUERY_TIMEOUT_SECONDS"), 10.0)
        verify_after_write = _env_bool(_k("VERIFY_AFTER_WRITE"), True)

        layout_viewport_width = _env_float(_k("LAYOUT_VIEWPORT_WIDTH"), 0.0)
        layout_compact = _env_bool(_k("LAYOUT_COMPACT"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            log_dir=log_dir,
            store_timeout_seconds=store_timeout_seconds,
            query_timeout_seconds=query_timeout_seconds,
            verify_after_write=verify_after_write,
            layout_viewport_width=layout_viewport_width,
            layout_compact=layout_compact,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
