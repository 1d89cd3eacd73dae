# tests/test_commands.py

from __future__ import annotations

from todolist.cli.commands import CommandRegistry, format_todo, registry
from todolist.core.state import AppState


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["alpha"])
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x y") == "h2:x,y"
    assert reg.handle(state, "/ALPHA") == "h2:"
    assert reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]
    assert "/a - a" in reg.build_help()


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert reg.handle(state, "/").startswith("Empty command")
    assert reg.handle(state, "/nope").startswith("Unknown command: /nope")


def test_add_command_parses_priority_tags_and_due(state: AppState) -> None:
    reply = registry.handle(state, "/add high Finish report #work #q1 due:2025-01-31")
    assert reply is not None and reply.startswith("Added:")

    (todo,) = state.todos.all_todos
    assert todo.text == "Finish report"
    assert todo.priority == "high"
    assert todo.tags == ("work", "q1")
    assert todo.due_date == "2025-01-31"


def test_add_command_surfaces_validation_error(state: AppState) -> None:
    reply = registry.handle(state, "/add " + "a" * 201)
    assert reply == "Error: Todo text is too long (max 200 characters)"
    assert len(state.todos) == 0

    # only a priority, no text
    assert registry.handle(state, "/add high") == "Error: Todo text cannot be empty"
    assert registry.handle(state, "/add").startswith("Usage:")


def test_list_uses_view_positions(state: AppState) -> None:
    assert "No todos." in registry.handle(state, "/list")

    state.todos.add("first")
    state.todos.add("second")
    out = registry.handle(state, "/ls")
    lines = out.splitlines()
    assert lines[0] == "Todos (filter=all, sort=date):"
    assert len(lines) == 3
    # both were added within the same ms or in order; positions are 1-based
    assert lines[1].lstrip().startswith("1. [ ]")
    assert lines[2].lstrip().startswith("2. [ ]")


def test_toggle_by_position_and_id(state: AppState) -> None:
    todo = state.todos.add("Task A")

    assert registry.handle(state, "/toggle 1") == "Completed: Task A"
    assert state.todos.get(todo.id).completed is True

    assert registry.handle(state, f"/done {todo.id}") == "Reopened: Task A"
    assert state.todos.get(todo.id).completed is False

    assert registry.handle(state, "/toggle 9") == "No todo 9."
    assert registry.handle(state, "/toggle").startswith("Usage:")


def test_edit(state: AppState) -> None:
    todo = state.todos.add("draft")

    assert registry.handle(state, "/edit 1 final text").startswith("Updated: [ ] final text")
    assert state.todos.get(todo.id).text == "final text"

    assert registry.handle(state, "/edit 1 " + "b" * 201).startswith("Error: Todo text is too long")
    assert state.todos.get(todo.id).text == "final text"

    state.todos.toggle(todo.id)
    assert registry.handle(state, "/edit 1 again").startswith("Completed todos cannot be edited")
    assert registry.handle(state, "/edit 1").startswith("Usage:")


def test_priority(state: AppState) -> None:
    todo = state.todos.add("x")
    assert registry.handle(state, "/priority 1 HIGH").startswith("Priority set:")
    assert state.todos.get(todo.id).priority == "high"
    assert registry.handle(state, "/priority 1 urgent").startswith("Usage:")


def test_delete(state: AppState) -> None:
    state.todos.add("gone")
    assert registry.handle(state, "/rm 1") == "Deleted: gone"
    assert len(state.todos) == 0
    assert registry.handle(state, "/delete 1") == "No todo 1."


def test_clear(state: AppState) -> None:
    a = state.todos.add("a")
    state.todos.add("b")
    state.todos.toggle(a.id)

    assert registry.handle(state, "/clear done") == "Removed 1 completed todo(s)."
    assert len(state.todos) == 1

    notes: list[str] = []
    assert registry.handle(state, "/clear all", emit=notes.append) == "All todos removed."
    assert len(state.todos) == 0
    assert notes == ["Removing all 1 todo(s)..."]
    assert state.store.get("todos-app-data") is None

    assert registry.handle(state, "/clear").startswith("Usage:")


def test_filter_and_sort(state: AppState) -> None:
    a = state.todos.add("zebra")
    state.todos.add("apple")
    state.todos.toggle(a.id)

    out = registry.handle(state, "/filter active")
    assert state.todos.filter_mode == "active"
    assert "apple" in out and "zebra" not in out

    assert registry.handle(state, "/filter").startswith("Filter is active.")
    assert registry.handle(state, "/filter done").startswith("Unknown filter: done")

    registry.handle(state, "/filter all")
    out = registry.handle(state, "/sort alphabetical")
    assert state.todos.sort_mode == "alphabetical"
    lines = out.splitlines()
    assert "apple" in lines[1] and "zebra" in lines[2]

    assert registry.handle(state, "/sort").startswith("Sort is alphabetical.")
    assert registry.handle(state, "/sort size").startswith("Unknown sort: size")


def test_stats(state: AppState) -> None:
    a = state.todos.add("a")
    state.todos.add("b")
    state.todos.add("c")
    state.todos.toggle(a.id)
    out = registry.handle(state, "/stats")
    assert "Total: 3" in out
    assert "Active: 2" in out
    assert "Completed: 1" in out
    assert "Progress: 33%" in out


def test_help_lists_commands(state: AppState) -> None:
    out = registry.handle(state, "/help")
    for name in ("add", "list", "toggle", "edit", "priority", "rm", "clear", "filter", "sort", "stats"):
        assert f"/{name} - " in out


def test_format_todo(state: AppState) -> None:
    todo = state.todos.add("/add ignored? no, plain text")
    line = format_todo(todo, 3)
    assert line.startswith("3. [ ] /add ignored? no, plain text  (!)")
