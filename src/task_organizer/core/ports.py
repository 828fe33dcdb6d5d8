# src/task_organizer/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The registry depends on this Protocol instead of the SQLite store,
so it can be exercised against an in-memory fake.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Section, Task


class TaskRepo(Protocol):
    """
    Section/task persistence.

    Implementations report failures through return values (None / False),
    never by raising.
    """

    # Sections
    def save_section(self, name: str) -> int | None: ...
    def load_all_sections(self) -> dict[str, Section]: ...
    def delete_section(self, name: str) -> bool: ...

    # Tasks
    def save_task(self, task: Task, section_name: str) -> int | None: ...
    def load_tasks_for_section(self, name: str) -> list[Task] | None: ...
    def delete_task(self, task_name: str, section_name: str) -> bool: ...
