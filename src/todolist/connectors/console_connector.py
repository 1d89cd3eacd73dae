# src/todolist/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import add_todo, cmd_list, cmd_stats
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def handle_line(state: AppState, line: str, emit: OutputFn | None = None) -> str | None:
    """
    Route one console line.

    "/..." goes to the command registry; anything else is added as a todo.
    Returns the reply to print, or None for blank input.
    """
    text = line.strip()
    if not text:
        return None

    if text.startswith("/"):
        return command_registry.handle(state, text, emit=emit)

    return add_todo(state, text)


def run_console_loop(
    state: AppState,
    *,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> None:
    logger.info("Console connector started (todos=%d).", len(state.todos))
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "todolist"))

    def emit(text: str) -> None:
        output_fn(f"[{_ts_local()}] {text}")

    emit(f"[{app_name}] Type a todo to add it. Use /help for commands. Use /exit to quit.")
    output_fn(cmd_stats(state, []))
    output_fn(cmd_list(state, []))

    while True:
        try:
            user_input = input_fn("todo> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            output_fn("")
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            output_fn(reply)

    logger.info("Console connector finished.")
