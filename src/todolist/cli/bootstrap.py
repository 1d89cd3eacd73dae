# src/todolist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the configured store into a TodoCollection and AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..todos.todo_collection import TodoCollection
from ..todos.todo_store import open_store

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.store_backend == "sqlite":
        settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings and load stored todos.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = open_store(settings.store_backend, settings.store_path)
    todos = TodoCollection(
        store,
        storage_key=settings.storage_key,
        persist_empty=settings.persist_empty,
        filter_mode=settings.default_filter,
        sort_mode=settings.default_sort,
    )
    todos.initialize()

    logger.info(
        "State ready backend=%s path=%s todos=%d",
        settings.store_backend,
        settings.store_path,
        len(todos),
    )
    return AppState(settings=settings, store=store, todos=todos)
