# src/taskpad/config.py

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

ENV_PREFIX = "TASKPAD"

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
    log_to_file: bool

    # ---- Storage ----
    storage_backend: str
    tasks_key: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    blob_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower() or "sqlite"
        tasks_key = _env(_k("TASKS_KEY"), "existing_tasks").strip() or "existing_tasks"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskpad.sqlite3")
        blob_dir = _env_path(_k("BLOB_DIR"), data_dir / "blobs")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            storage_backend=storage_backend,
            tasks_key=tasks_key,
            data_dir=data_dir,
            db_path=db_path,
            blob_dir=blob_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
