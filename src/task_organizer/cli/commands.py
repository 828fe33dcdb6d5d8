# src/task_organizer/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Priority, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

FIELD_SEP = "|"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    def register_help(self, name: str, help_text: str) -> None:
        """Help-only entry for commands the connector handles itself (/exit)."""
        self._help[name.lower()] = help_text

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _joined(args: list[str]) -> str:
    return " ".join(args).strip()


def _fields(args: list[str]) -> list[str]:
    """Split "a | b | c" into stripped fields."""
    return [f.strip() for f in _joined(args).split(FIELD_SEP)]


def _display_format(state: AppState) -> str:
    return str(getattr(state.settings, "date_display_format", "%b %d, %Y"))


def _parse_due_date(state: AppState, raw: str) -> date:
    fmt = str(getattr(state.settings, "date_input_format", "%Y-%m-%d"))
    try:
        return datetime.strptime(raw, fmt).date()
    except ValueError:
        raise ValueError(f"Bad due date {raw!r} (expected format {fmt})") from None


def _format_tasks(state: AppState, title: str, tasks: Iterable[Task]) -> str:
    fmt = _display_format(state)
    lines = [f"{i}. {t.describe(fmt)}" for i, t in enumerate(tasks, start=1)]
    if not lines:
        return f"{title}: no tasks."
    return "\n".join([f"{title}:", *lines])


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    reg = state.registry
    db_path = getattr(state.settings, "db_path", "?")
    return (
        "Status:\n"
        f"  Sections: {reg.section_count()}\n"
        f"  Tasks: {reg.task_count()}\n"
        f"  Database: {db_path}"
    )


def cmd_sections(state: AppState, args: list[str]) -> str:
    names = state.registry.list_section_names()
    if not names:
        return "No sections yet. Use /addsection <name>."
    lines = ["Sections:"]
    for name in names:
        lines.append(f"  {name} ({len(state.registry.list_tasks(name))} tasks)")
    return "\n".join(lines)


def cmd_section(state: AppState, args: list[str]) -> str:
    name = _joined(args)
    if not name:
        return "Usage: /section <name>"
    if name not in state.registry.list_section_names():
        return f"No section named '{name}'."
    return _format_tasks(state, f"Tasks in '{name}'", state.registry.list_tasks(name))


def cmd_add_section(state: AppState, args: list[str]) -> str:
    name = _joined(args)
    if not name:
        return "Section name cannot be empty."
    if state.registry.add_section(name):
        return f"Section '{name}' is ready."
    return f"Failed to add section '{name}'."


def cmd_remove_section(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    name = _joined(args)
    if not name:
        return "Usage: /rmsection <name>"
    count = len(state.registry.list_tasks(name))
    if emit is not None and count:
        emit(f"Deleting section '{name}' and its {count} tasks...")
    if state.registry.remove_section(name):
        return f"Section '{name}' removed."
    return f"Failed to remove section '{name}' (does it exist?)."


def cmd_add_task(state: AppState, args: list[str]) -> str:
    """
    /add <section> | <task name> | <priority> | <YYYY-MM-DD>
    """
    usage = f"Usage: /add <section> {FIELD_SEP} <task name> {FIELD_SEP} <low|moderate|high> {FIELD_SEP} <due date>"
    fields = _fields(args)
    if len(fields) != 4 or not all(fields):
        return "Please fill in all task details: section, name, priority and due date.\n" + usage

    section_name, task_name, raw_priority, raw_due = fields
    try:
        task = Task(
            name=task_name,
            priority=Priority.parse(raw_priority),
            due_date=_parse_due_date(state, raw_due),
        )
    except ValueError as e:
        logger.debug("Rejected /add input %r: %s", fields, e)
        return str(e)

    if state.registry.add_task(section_name, task):
        return f"Added to '{section_name}': {task.describe(_display_format(state))}"
    return f"Failed to add task '{task_name}' to section '{section_name}'."


def cmd_remove_task(state: AppState, args: list[str]) -> str:
    """
    /rm <section> | <task name>
    """
    fields = _fields(args)
    if len(fields) != 2 or not all(fields):
        return f"Usage: /rm <section> {FIELD_SEP} <task name>"

    section_name, task_name = fields
    matches = [t for t in state.registry.list_tasks(section_name) if t.name == task_name]
    if not matches:
        return f"No task '{task_name}' in section '{section_name}'."

    if state.registry.remove_task(section_name, matches[0]):
        return f"Task '{task_name}' removed from '{section_name}'."
    return f"Failed to remove task '{task_name}' from '{section_name}'."


def cmd_all(state: AppState, args: list[str]) -> str:
    return _format_tasks(state, "All tasks", state.registry.list_all_tasks())


def cmd_search(state: AppState, args: list[str]) -> str:
    term = _joined(args)
    if not term:
        return "Please enter a search term: /search <text>"
    return _format_tasks(state, f"Search '{term}'", state.registry.search_by_name(term))


def cmd_sorted(state: AppState, args: list[str]) -> str:
    return _format_tasks(
        state,
        "All tasks by due date, then priority",
        state.registry.sorted_by_due_date_then_priority(),
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show section/task totals and database path.")
registry.register("sections", cmd_sections, help_text="List sections in creation order.")
registry.register("section", cmd_section, help_text="List tasks of one section: /section <name>.")
registry.register("addsection", cmd_add_section, help_text="Create a section: /addsection <name>.")
registry.register(
    "rmsection", cmd_remove_section, help_text="Delete a section and all its tasks: /rmsection <name>."
)
registry.register(
    "add",
    cmd_add_task,
    help_text="Add a task: /add <section> | <name> | <low|moderate|high> | <YYYY-MM-DD>.",
)
registry.register("rm", cmd_remove_task, help_text="Remove a task: /rm <section> | <name>.")
registry.register("all", cmd_all, help_text="List every task, section by section.")
registry.register("search", cmd_search, help_text="Find tasks by name (case-insensitive): /search <text>.")
registry.register("sorted", cmd_sorted, help_text="List all tasks by due date, then priority.")
registry.register_help("exit", "Leave the console (same as /quit).")
