# todos/todo_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

MAX_TEXT_LENGTH = 200


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FilterMode(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class SortMode(StrEnum):
    DATE = "date"
    ALPHABETICAL = "alphabetical"
    PRIORITY = "priority"


# ---- errors ----


class TodoError(Exception):
    """Base class for everything raised by the todo engine."""


class TodoTextError(TodoError):
    """Todo text rejected by validation."""


class TextTypeError(TodoTextError, TypeError):
    pass


class EmptyTextError(TodoTextError, ValueError):
    pass


class TooLongError(TodoTextError, ValueError):
    pass


class FieldTypeError(TodoError, TypeError):
    """Update patch value has the wrong type for its field."""


class PersistenceParseError(TodoError):
    """Stored collection could not be decoded. Recovered by starting empty."""


# ---- records ----


@dataclass(frozen=True, slots=True)
class TodoOptions:
    """
    Optional fields for a new todo.

    Falsy values fall back to the defaults (empty priority -> "low").
    """

    priority: str = Priority.LOW.value
    due_date: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Todo:
    id: str
    text: str
    completed: bool
    created_at: int  # ms since epoch
    priority: str = Priority.LOW.value  # unknown values are kept, sorted as "low"
    due_date: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TextCheck:
    """
    Outcome of text validation without raising.

    Exactly one of `text` / `error` is set.
    """

    text: str | None = None
    error: TodoTextError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class TodoStats:
    total: int
    completed: int
    active: int
    completion_rate: int  # percent, 0..100

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "active": self.active,
            "completionRate": self.completion_rate,
        }
