# todos/todo_ops.py

"""
Pure record operations: ids, text validation, construction,
filtering, ordering, statistics and the persisted dict shape.

Nothing here touches a store or a collection.
"""

from __future__ import annotations

import locale
import secrets
import string
import time
import unicodedata
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, cast

from .todo_models import (
    MAX_TEXT_LENGTH,
    EmptyTextError,
    FilterMode,
    PersistenceParseError,
    Priority,
    SortMode,
    TextCheck,
    TextTypeError,
    Todo,
    TodoOptions,
    TodoStats,
    TooLongError,
)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LEN = 9

_PRIORITY_RANK = {
    Priority.HIGH.value: 0,
    Priority.MEDIUM.value: 1,
    Priority.LOW.value: 2,
}


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_id(ts_ms: int | None = None) -> str:
    """Return "<ms timestamp>-<base36 suffix>", e.g. "1678886400000-1a2b3c4d5"."""
    ts = now_ms() if ts_ms is None else int(ts_ms)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LEN))
    return f"{ts}-{suffix}"


# ---- text validation ----


def check_text(value: Any) -> TextCheck:
    if not isinstance(value, str):
        return TextCheck(error=TextTypeError("Todo text must be a string"))

    trimmed = value.strip()
    if not trimmed:
        return TextCheck(error=EmptyTextError("Todo text cannot be empty"))
    if len(trimmed) > MAX_TEXT_LENGTH:
        return TextCheck(
            error=TooLongError(f"Todo text is too long (max {MAX_TEXT_LENGTH} characters)")
        )
    return TextCheck(text=trimmed)


def validate_text(value: Any) -> str:
    """
    Return the trimmed text or raise.

    Raises TextTypeError, EmptyTextError or TooLongError.
    """
    check = check_text(value)
    if check.error is not None:
        raise check.error
    return cast(str, check.text)


# ---- construction ----


def build_todo(text: Any, options: TodoOptions | None = None, *, ts_ms: int | None = None) -> Todo:
    """Validate text and build a fresh, not-completed record. Validation errors propagate."""
    clean = validate_text(text)
    opts = options or TodoOptions()
    ts = now_ms() if ts_ms is None else int(ts_ms)

    return Todo(
        id=generate_id(ts),
        text=clean,
        completed=False,
        created_at=ts,
        priority=opts.priority or Priority.LOW.value,
        due_date=opts.due_date or None,
        tags=tuple(opts.tags or ()),
    )


# ---- filtering / ordering ----


def select_by_status(todos: Iterable[Todo], mode: str) -> list[Todo]:
    if mode == FilterMode.ACTIVE:
        return [t for t in todos if not t.completed]
    if mode == FilterMode.COMPLETED:
        return [t for t in todos if t.completed]
    return list(todos)


def priority_rank(value: str | None) -> int:
    return _PRIORITY_RANK.get(value or Priority.LOW.value, _PRIORITY_RANK[Priority.LOW.value])


def _fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _text_key(todo: Todo) -> tuple[str, str, str]:
    # accent-folded first so "éclair" < "zebra" even in the C locale
    folded = todo.text.casefold()
    return (
        locale.strxfrm(_fold_accents(folded)),
        locale.strxfrm(folded),
        locale.strxfrm(todo.text),
    )


def order_todos(todos: Iterable[Todo], mode: str = SortMode.DATE) -> list[Todo]:
    items = list(todos)

    if mode == SortMode.DATE:
        items.sort(key=lambda t: t.created_at, reverse=True)
    elif mode == SortMode.ALPHABETICAL:
        items.sort(key=_text_key)
    elif mode == SortMode.PRIORITY:
        items.sort(key=lambda t: priority_rank(t.priority))
    return items


# ---- stats ----


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_stats(todos: Iterable[Todo]) -> TodoStats:
    items = list(todos)
    total = len(items)
    completed = sum(1 for t in items if t.completed)
    rate = _round_half_up(Decimal(completed * 100) / Decimal(total)) if total > 0 else 0
    return TodoStats(
        total=total,
        completed=completed,
        active=total - completed,
        completion_rate=rate,
    )


# ---- persisted shape ----


def todo_to_dict(todo: Todo) -> dict[str, Any]:
    return {
        "id": todo.id,
        "text": todo.text,
        "completed": todo.completed,
        "createdAt": todo.created_at,
        "priority": todo.priority,
        "dueDate": todo.due_date,
        "tags": list(todo.tags),
    }


def todo_from_dict(raw: Any) -> Todo:
    """
    Rebuild a record from its persisted form.

    Optional fields fall back to defaults; a missing id or text is corrupt data.
    """
    if not isinstance(raw, Mapping):
        raise PersistenceParseError(f"todo entry is not an object: {type(raw).__name__}")

    tid = raw.get("id")
    text = raw.get("text")
    if not isinstance(tid, str) or not tid:
        raise PersistenceParseError(f"todo entry has no valid id: {tid!r}")
    if not isinstance(text, str):
        raise PersistenceParseError(f"todo {tid} has no valid text")

    created_raw = raw.get("createdAt", 0)
    try:
        created_at = int(created_raw or 0)
    except (TypeError, ValueError) as e:
        raise PersistenceParseError(f"todo {tid} has invalid createdAt: {created_raw!r}") from e

    tags_raw = raw.get("tags") or []
    if not isinstance(tags_raw, list):
        raise PersistenceParseError(f"todo {tid} has invalid tags")

    due = raw.get("dueDate")
    return Todo(
        id=tid,
        text=text,
        completed=bool(raw.get("completed", False)),
        created_at=created_at,
        priority=str(raw.get("priority") or Priority.LOW.value),
        due_date=str(due) if due is not None else None,
        tags=tuple(str(t) for t in tags_raw),
    )
