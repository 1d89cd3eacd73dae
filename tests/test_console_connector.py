# tests/test_console_connector.py

from __future__ import annotations

from collections.abc import Iterator
from types import SimpleNamespace

from todolist.cli.bootstrap import create_initial_state
from todolist.connectors.console_connector import handle_line, run_console_loop
from todolist.core.state import AppState


def _scripted(lines: list[str]):
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return fake_input


def test_plain_text_adds_todo(state: AppState) -> None:
    reply = handle_line(state, "  Buy milk  ")
    assert reply is not None and reply.startswith("Added: [ ] Buy milk")
    assert [t.text for t in state.todos.all_todos] == ["Buy milk"]

    assert handle_line(state, "   ") is None
    assert handle_line(state, "/stats").startswith("Stats:")


def test_loop_runs_script_until_exit(state: AppState) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        input_fn=_scripted(["Task A", "/toggle 1", "", "/exit", "never reached"]),
        output_fn=out.append,
    )
    assert "Completed: Task A" in out
    assert len(state.todos) == 1
    assert state.todos.all_todos[0].completed is True


def test_loop_stops_on_eof_and_reports_errors(state: AppState) -> None:
    out: list[str] = []
    run_console_loop(state, input_fn=_scripted(["/add " + "x" * 300]), output_fn=out.append)
    assert "Error: Todo text is too long (max 200 characters)" in out
    assert len(state.todos) == 0


def test_loop_survives_crashing_handler(state: AppState, monkeypatch) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("todolist.connectors.console_connector.add_todo", boom)
    out: list[str] = []
    run_console_loop(state, input_fn=_scripted(["crash please", "/exit"]), output_fn=out.append)
    assert "Internal error while handling a command." in out


def test_bootstrap_reloads_from_disk(settings: SimpleNamespace) -> None:
    first = create_initial_state(settings=settings)
    handle_line(first, "persist me")

    second = create_initial_state(settings=settings)
    assert [t.text for t in second.todos.all_todos] == ["persist me"]
    assert (settings.store_path / "todos-app-data.json").exists()


def test_bootstrap_sqlite_and_view_defaults(settings: SimpleNamespace) -> None:
    settings.store_backend = "sqlite"
    settings.store_path = settings.data_dir / "db" / "todos.sqlite3"
    settings.default_filter = "active"
    settings.default_sort = "priority"

    state = create_initial_state(settings=settings)
    assert state.todos.filter_mode == "active"
    assert state.todos.sort_mode == "priority"
    handle_line(state, "/add high urgent")
    assert settings.store_path.exists()
