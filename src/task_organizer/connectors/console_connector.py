# src/task_organizer/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(
    state: AppState,
    *,
    commands: CommandRegistry | None = None,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = _print_ts,
) -> None:
    """
    Interactive REPL over the slash-command registry.

    Blocks on one command at a time; returns on /exit, EOF or Ctrl+C.
    """
    commands = commands or command_registry
    app_name = str(getattr(state.settings, "app_name", "task-organizer"))

    logger.info("Console connector started.")
    write(f"[{app_name}] Type /help for commands. Use /exit to quit.")

    while True:
        try:
            user_input = read_line(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            response = commands.handle(state, user_input, emit=write)
        except Exception:
            logger.exception("Command handler crashed: %r", user_input)
            response = "Internal error while handling a command."

        if response is None:
            response = "Commands start with '/'. Use /help to list available commands."

        write(response)

    logger.info("Console connector finished.")
