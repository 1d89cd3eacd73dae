# src/todolist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (store + loaded todo collection),
then runs the console REPL in the main thread.
"""

from __future__ import annotations

import locale
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    store = getattr(state, "store", None)
    if store is not None and hasattr(store, "close"):
        try:
            store.close()
        except Exception:
            logger.debug("Store close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (log level %s)...", settings.app_name, level_name)

    # alphabetical sort collates with the user's locale
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("User locale unavailable; collating in the C locale.")

    state = create_initial_state(settings=settings)
    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
