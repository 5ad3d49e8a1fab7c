# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a default; a bare checkout runs without any configuration.
- Malformed values fall back to the default instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"

STORE_BACKENDS = ("sqlite", "memory")
SORT_FIELDS = ("created_at", "due_date", "priority", "title")
SORT_ORDERS = ("asc", "desc")


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


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    return v if v in choices else default


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

    # ---- Storage ----
    store_backend: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    prefs_path: Path

    # ---- Initial view ----
    default_sort_by: str
    default_sort_order: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck").strip() or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        store_backend = _env_choice(_k("STORE_BACKEND"), STORE_BACKENDS, "sqlite")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        prefs_path = _env_path(_k("PREFS_PATH"), data_dir / "prefs.json")

        default_sort_by = _env_choice(_k("DEFAULT_SORT_BY"), SORT_FIELDS, "created_at")
        default_sort_order = _env_choice(_k("DEFAULT_SORT_ORDER"), SORT_ORDERS, "desc")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            store_backend=store_backend,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            prefs_path=prefs_path,
            default_sort_by=default_sort_by,
            default_sort_order=default_sort_order,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
