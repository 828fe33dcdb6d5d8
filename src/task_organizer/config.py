# src/task_organizer/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a local default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKORG"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


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

    # ---- Presentation ----
    console_enabled: bool
    date_input_format: str
    date_display_format: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    db_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-organizer").strip() or "task-organizer"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        date_input_format = _env(_k("DATE_INPUT_FORMAT"), "%Y-%m-%d")
        date_display_format = _env(_k("DATE_DISPLAY_FORMAT"), "%b %d, %Y")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_organizer"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "tasks.sqlite3")
        db_timeout_seconds = max(0.0, _env_float(_k("DB_TIMEOUT_SECONDS"), 30.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            date_input_format=date_input_format,
            date_display_format=date_display_format,
            data_dir=data_dir,
            db_path=db_path,
            db_timeout_seconds=db_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
