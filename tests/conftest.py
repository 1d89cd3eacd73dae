# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todolist.core.state import AppState
from todolist.todos.todo_collection import TodoCollection
from todolist.todos.todo_store import MemoryKeyValueStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todolist-test",
        log_level="WARNING",
        data_dir=tmp_path,
        store_backend="json",
        store_path=tmp_path / "store",
        storage_key="todos-app-data",
        persist_empty=False,
        default_filter="all",
        default_sort="date",
    )


@pytest.fixture()
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def todos(store: MemoryKeyValueStore) -> TodoCollection:
    collection = TodoCollection(store)
    collection.initialize()
    return collection


@pytest.fixture()
def state(settings: SimpleNamespace, store: MemoryKeyValueStore, todos: TodoCollection) -> AppState:
    """AppState wired with an in-memory store."""
    return AppState(settings=settings, store=store, todos=todos)
