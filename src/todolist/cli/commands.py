# src/todolist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..todos.todo_models import FilterMode, Priority, SortMode, Todo, TodoOptions, TodoTextError

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_PRIORITY_BADGE = {
    Priority.HIGH.value: "(!!!)",
    Priority.MEDIUM.value: "(!!)",
    Priority.LOW.value: "(!)",
}


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _fmt_created(ts_ms: int) -> str:
    return datetime.fromtimestamp(ts_ms / 1000).astimezone().strftime("%Y-%m-%d %H:%M")


def format_todo(todo: Todo, position: int | None = None) -> str:
    mark = "[x]" if todo.completed else "[ ]"
    prefix = f"{position}. " if position is not None else ""
    parts = [f"{prefix}{mark} {todo.text}", _PRIORITY_BADGE.get(todo.priority, f"({todo.priority})")]
    if todo.due_date:
        parts.append(f"due:{todo.due_date}")
    if todo.tags:
        parts.append(" ".join(f"#{t}" for t in todo.tags))
    parts.append(f"[{_fmt_created(todo.created_at)}]")
    return "  ".join(parts)


def _resolve(state: AppState, token: str) -> Todo | None:
    """Accept a 1-based position in the current view, or a full todo id."""
    if token.isdigit():
        view = state.todos.view()
        pos = int(token)
        if 1 <= pos <= len(view):
            return view[pos - 1]
        return None
    return state.todos.get(token)


def _parse_add_args(args: list[str]) -> tuple[str, TodoOptions]:
    """
    [low|medium|high] words... [#tag ...] [due:DATE]
    """
    priority = Priority.LOW.value
    due_date: str | None = None
    tags: list[str] = []
    words: list[str] = []

    rest = list(args)
    if rest and rest[0].lower() in {p.value for p in Priority}:
        priority = rest.pop(0).lower()

    for tok in rest:
        if tok.startswith("#") and len(tok) > 1:
            tags.append(tok[1:])
        elif tok.lower().startswith("due:") and len(tok) > 4:
            due_date = tok[4:]
        else:
            words.append(tok)

    return " ".join(words), TodoOptions(priority=priority, due_date=due_date, tags=tuple(tags))


def add_todo(state: AppState, text: str, options: TodoOptions | None = None) -> str:
    """Add a todo and turn validation errors into a user-facing message."""
    try:
        todo = state.todos.add(text, options)
    except TodoTextError as e:
        logger.debug("Todo rejected: %s", e)
        return f"Error: {e}"
    return f"Added: {format_todo(todo)}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk                     -> low priority
    /add high Finish report #work     -> high priority, tag "work"
    /add medium Pay rent due:2025-01-01
    """
    if not args:
        return "Usage: /add [low|medium|high] text... [#tag] [due:DATE]"
    text, options = _parse_add_args(args)
    return add_todo(state, text, options)


def cmd_list(state: AppState, args: list[str]) -> str:
    todos = state.todos
    view = todos.view()
    header = f"Todos (filter={todos.filter_mode}, sort={todos.sort_mode}):"
    if not view:
        return f"{header}\n  No todos."
    lines = [header]
    for i, t in enumerate(view, start=1):
        lines.append(f"  {format_todo(t, i)}")
    return "\n".join(lines)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle N|ID"
    todo = _resolve(state, args[0])
    if todo is None:
        return f"No todo {args[0]}."
    updated = state.todos.toggle(todo.id)
    if updated is None:
        return f"No todo {args[0]}."
    return f"{'Completed' if updated.completed else 'Reopened'}: {updated.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit N|ID new text..."
    todo = _resolve(state, args[0])
    if todo is None:
        return f"No todo {args[0]}."
    if todo.completed:
        return "Completed todos cannot be edited. Reopen it first with /toggle."
    try:
        updated = state.todos.update(todo.id, {"text": " ".join(args[1:])})
    except TodoTextError as e:
        logger.debug("Edit rejected id=%s: %s", todo.id, e)
        return f"Error: {e}"
    if updated is None:
        return f"No todo {args[0]}."
    return f"Updated: {format_todo(updated)}"


def cmd_priority(state: AppState, args: list[str]) -> str:
    choices = [p.value for p in Priority]
    if len(args) < 2 or args[1].lower() not in choices:
        return f"Usage: /priority N|ID {'|'.join(choices)}"
    todo = _resolve(state, args[0])
    if todo is None:
        return f"No todo {args[0]}."
    updated = state.todos.update(todo.id, {"priority": args[1].lower()})
    if updated is None:
        return f"No todo {args[0]}."
    return f"Priority set: {format_todo(updated)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm N|ID"
    todo = _resolve(state, args[0])
    if todo is None or not state.todos.delete(todo.id):
        return f"No todo {args[0]}."
    return f"Deleted: {todo.text}"


def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /clear done -> remove completed todos
    /clear all  -> remove everything (also from storage)
    """
    sub = args[0].lower() if args else ""
    if sub in ("done", "completed"):
        removed = state.todos.clear_completed()
        return f"Removed {removed} completed todo(s)."
    if sub == "all":
        total = len(state.todos)
        if emit:
            emit(f"Removing all {total} todo(s)...")
        state.todos.clear_all()
        return "All todos removed."
    return "Usage: /clear done | /clear all"


def cmd_filter(state: AppState, args: list[str]) -> str:
    choices = [m.value for m in FilterMode]
    if not args:
        return f"Filter is {state.todos.filter_mode}. Use /filter {'|'.join(choices)}."
    mode = args[0].lower()
    if mode not in choices:
        return f"Unknown filter: {mode}. Use /filter {'|'.join(choices)}."
    state.todos.set_filter(mode)
    return cmd_list(state, [])


def cmd_sort(state: AppState, args: list[str]) -> str:
    choices = [m.value for m in SortMode]
    if not args:
        return f"Sort is {state.todos.sort_mode}. Use /sort {'|'.join(choices)}."
    mode = args[0].lower()
    if mode not in choices:
        return f"Unknown sort: {mode}. Use /sort {'|'.join(choices)}."
    state.todos.set_sort(mode)
    return cmd_list(state, [])


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.todos.stats()
    return (
        "Stats:\n"
        f"  Total: {s.total}\n"
        f"  Active: {s.active}\n"
        f"  Completed: {s.completed}\n"
        f"  Progress: {s.completion_rate}%"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a todo: /add [low|medium|high] text [#tag] [due:DATE]."
)
registry.register("list", cmd_list, help_text="Show todos (current filter and sort).", aliases=["ls"])
registry.register("toggle", cmd_toggle, help_text="Mark done / reopen: /toggle N|ID.", aliases=["done"])
registry.register("edit", cmd_edit, help_text="Change text: /edit N|ID new text.")
registry.register("priority", cmd_priority, help_text="Set priority: /priority N|ID low|medium|high.")
registry.register("rm", cmd_delete, help_text="Delete a todo: /rm N|ID.", aliases=["delete", "del"])
registry.register("clear", cmd_clear, help_text="Bulk delete: /clear done | /clear all.")
registry.register("filter", cmd_filter, help_text="Filter view: /filter all|active|completed.")
registry.register("sort", cmd_sort, help_text="Sort view: /sort date|alphabetical|priority.")
registry.register("stats", cmd_stats, help_text="Show totals and progress.")
