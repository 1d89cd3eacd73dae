# src/todolist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TODOLIST"


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


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    return value if value in choices else default


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

    # ---- Storage ----
    data_dir: Path
    store_backend: str  # json | sqlite | memory
    store_path: Path
    storage_key: str
    persist_empty: bool

    # ---- View defaults ----
    default_filter: str
    default_sort: str

    @staticmethod
    def from_env(*, use_dotenv: bool = True) -> "Settings":
        if use_dotenv:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        app_name = _env(_k("APP_NAME"), "todolist").strip() or "todolist"
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todolist"))
        store_backend = _env_choice(_k("STORE_BACKEND"), "json", ("json", "sqlite", "memory"))
        # json -> directory of <key>.json files; sqlite -> database file
        default_store = data_dir / ("todos.sqlite3" if store_backend == "sqlite" else "store")
        store_path = _env_path(_k("STORE_PATH"), default_store)
        storage_key = _env(_k("STORAGE_KEY"), "todos-app-data").strip() or "todos-app-data"
        persist_empty = _env_bool(_k("PERSIST_EMPTY"), False)

        default_filter = _env_choice(_k("DEFAULT_FILTER"), "all", ("all", "active", "completed"))
        default_sort = _env_choice(_k("DEFAULT_SORT"), "date", ("date", "alphabetical", "priority"))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_backend=store_backend,
            store_path=store_path,
            storage_key=storage_key,
            persist_empty=persist_empty,
            default_filter=default_filter,
            default_sort=default_sort,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
