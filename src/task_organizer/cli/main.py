# src/task_organizer/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (one full load from the store),
then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # The store uses short-lived sqlite connections per call; close() is a no-op hook.
    try:
        store = getattr(state, "store", None)
        if store is not None and hasattr(store, "close"):
            store.close()
    except Exception:
        logger.debug("Store close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/task_organizer")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "task-organizer"))

    state = create_initial_state(settings=settings)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info(
                "Console disabled (TASKORG_CONSOLE_ENABLED=false); loaded %d sections, exiting.",
                state.registry.section_count(),
            )
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
