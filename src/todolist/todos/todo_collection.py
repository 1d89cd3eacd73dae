# todos/todo_collection.py

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from ..core.ports import KeyValueStore
from .todo_models import (
    FieldTypeError,
    FilterMode,
    PersistenceParseError,
    SortMode,
    Todo,
    TodoOptions,
    TodoStats,
)
from .todo_ops import (
    build_todo,
    compute_stats,
    order_todos,
    select_by_status,
    todo_from_dict,
    todo_to_dict,
    validate_text,
)
from .todo_store import StorageError

logger = logging.getLogger(__name__)

STORAGE_KEY = "todos-app-data"

# patch key -> Todo attribute
_PATCHABLE = {
    "text": "text",
    "completed": "completed",
    "priority": "priority",
    "due_date": "due_date",
    "dueDate": "due_date",
    "tags": "tags",
}
_IMMUTABLE = {"id", "created_at", "createdAt"}


def decode_todos(raw: str) -> list[Todo]:
    """Parse the stored JSON array. Raises PersistenceParseError on anything malformed."""
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise PersistenceParseError(f"stored todos are not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise PersistenceParseError(f"stored todos are not an array: {type(data).__name__}")
    return [todo_from_dict(item) for item in data]


def encode_todos(todos: list[Todo]) -> str:
    return json.dumps([todo_to_dict(t) for t in todos], ensure_ascii=False)


def _check_tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(t, str) for t in value):
        raise FieldTypeError("tags must be a list of strings")
    return tuple(value)


class TodoCollection:
    """
    Owner of the authoritative todo list.

    - every mutation goes through the record operations, then persist()
    - view() is filter -> sort over the current list, never cached
    - store failures are logged, never raised; validation errors are raised

    Persistence quirk kept on purpose: an empty list is not written unless
    persist_empty=True, so deleting the last todo one by one leaves the
    previous snapshot in the store. clear_all() removes the key explicitly.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        storage_key: str = STORAGE_KEY,
        persist_empty: bool = False,
        filter_mode: str = FilterMode.ALL,
        sort_mode: str = SortMode.DATE,
    ) -> None:
        self._store = store
        self._key = storage_key
        self._persist_empty = persist_empty
        self._todos: list[Todo] = []
        self._filter = str(filter_mode)
        self._sort = str(sort_mode)
        self._initialized = False

    # ---- load / save ----

    def initialize(self) -> None:
        """Load the stored list once. Corrupt or unreadable data -> start empty."""
        if self._initialized:
            return
        self._initialized = True

        try:
            raw = self._store.get(self._key)
        except StorageError:
            logger.exception("Failed to read todos key=%s; starting empty.", self._key)
            return

        if raw is None:
            logger.info("No stored todos key=%s; starting empty.", self._key)
            return

        try:
            self._todos = decode_todos(raw)
        except PersistenceParseError:
            logger.exception("Failed to parse todos key=%s; starting empty.", self._key)
            self._todos = []
            return

        logger.info("Loaded %d todos key=%s", len(self._todos), self._key)

    def persist(self) -> None:
        if not self._todos and not self._persist_empty:
            logger.debug("Todo list empty; skipping write key=%s", self._key)
            return
        try:
            self._store.set(self._key, encode_todos(self._todos))
        except StorageError:
            logger.exception("Failed to save %d todos key=%s", len(self._todos), self._key)

    # ---- queries ----

    @property
    def all_todos(self) -> list[Todo]:
        return list(self._todos)

    @property
    def filter_mode(self) -> str:
        return self._filter

    @property
    def sort_mode(self) -> str:
        return self._sort

    def __len__(self) -> int:
        return len(self._todos)

    def get(self, todo_id: str) -> Todo | None:
        for t in self._todos:
            if t.id == todo_id:
                return t
        return None

    def view(self) -> list[Todo]:
        return order_todos(select_by_status(self._todos, self._filter), self._sort)

    def stats(self) -> TodoStats:
        return compute_stats(self._todos)

    # ---- mutations ----

    def add(self, text: Any, options: TodoOptions | None = None) -> Todo:
        todo = build_todo(text, options)
        self._todos.insert(0, todo)
        logger.debug("Todo added id=%s priority=%s", todo.id, todo.priority)
        self.persist()
        return todo

    def _index_of(self, todo_id: str) -> int | None:
        for i, t in enumerate(self._todos):
            if t.id == todo_id:
                return i
        return None

    def toggle(self, todo_id: str) -> Todo | None:
        idx = self._index_of(todo_id)
        updated: Todo | None = None
        if idx is not None:
            current = self._todos[idx]
            updated = replace(current, completed=not current.completed)
            self._todos[idx] = updated
            logger.debug("Todo toggled id=%s completed=%s", todo_id, updated.completed)
        self.persist()
        return updated

    def delete(self, todo_id: str) -> bool:
        before = len(self._todos)
        self._todos = [t for t in self._todos if t.id != todo_id]
        removed = len(self._todos) != before
        if removed:
            logger.debug("Todo deleted id=%s", todo_id)
        self.persist()
        return removed

    def update(self, todo_id: str, patch: Mapping[str, Any]) -> Todo | None:
        """
        Merge `patch` onto the todo with `todo_id`.

        - "text" is validated like on add (errors propagate, nothing changes)
        - "completed" must be a bool, "tags" a list of strings (FieldTypeError)
        - "id" / "created_at" are ignored
        - unknown keys are ignored
        """
        changes: dict[str, Any] = {}
        for key, value in patch.items():
            if key in _IMMUTABLE:
                logger.warning("Ignoring immutable field %r in update of id=%s", key, todo_id)
                continue
            attr = _PATCHABLE.get(key)
            if attr is None:
                logger.warning("Ignoring unknown field %r in update of id=%s", key, todo_id)
                continue
            changes[attr] = value

        if "text" in changes:
            changes["text"] = validate_text(changes["text"])
        if "tags" in changes:
            changes["tags"] = _check_tags(changes["tags"])
        if "completed" in changes and not isinstance(changes["completed"], bool):
            raise FieldTypeError(f"completed must be a bool, got {type(changes['completed']).__name__}")

        idx = self._index_of(todo_id)
        updated: Todo | None = None
        if idx is not None:
            updated = replace(self._todos[idx], **changes)
            self._todos[idx] = updated
            logger.debug("Todo updated id=%s fields=%s", todo_id, sorted(changes))
        self.persist()
        return updated

    def clear_completed(self) -> int:
        before = len(self._todos)
        self._todos = [t for t in self._todos if not t.completed]
        removed = before - len(self._todos)
        logger.debug("Cleared %d completed todos", removed)
        self.persist()
        return removed

    def clear_all(self) -> None:
        self._todos = []
        try:
            self._store.remove(self._key)
        except StorageError:
            logger.exception("Failed to remove todos key=%s", self._key)
        logger.info("All todos cleared key=%s", self._key)

    # ---- view parameters ----

    def set_filter(self, mode: str) -> None:
        self._filter = str(mode)

    def set_sort(self, mode: str) -> None:
        self._sort = str(mode)
