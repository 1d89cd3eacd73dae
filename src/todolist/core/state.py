# src/todolist/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..todos.todo_collection import TodoCollection
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings kept on the state for easy access from commands/connectors.
    settings: object

    store: KeyValueStore
    todos: TodoCollection
