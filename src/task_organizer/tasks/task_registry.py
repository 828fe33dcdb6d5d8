# src/task_organizer/tasks/task_registry.py

"""
In-memory registry of sections and their tasks.

Writes go to the repository first; the in-memory mapping changes only after
the repository confirms success (write-through). All reads are served from memory.
"""

from __future__ import annotations

import logging
from datetime import date

from ..core.ports import TaskRepo
from .task_models import Section, Task

logger = logging.getLogger(__name__)


def due_date_then_priority_key(task: Task) -> tuple[date, int]:
    # Earlier date first; within a date, higher rank first.
    return (task.due_date, -task.priority.rank)


class TaskRegistry:
    def __init__(self, repo: TaskRepo) -> None:
        self._repo = repo
        # dict keeps insertion order; this is the section order shown to users.
        self._sections: dict[str, Section] = {}

    # ---- startup ----

    def initialize(self) -> None:
        """
        Replace local state with a full load from the repository.

        A section whose tasks fail to load is kept with zero tasks.
        """
        self._sections.clear()
        loaded = self._repo.load_all_sections()
        logger.info("Loading %d sections from store", len(loaded))

        for name, section in loaded.items():
            tasks = self._repo.load_tasks_for_section(name)
            if tasks is None:
                logger.warning("Failed to load tasks for section %r; keeping it empty", name)
                tasks = []
            for task in tasks:
                section.add_task(task)
            self._sections[name] = section
            logger.debug("Section %r loaded with %d tasks", name, len(section))

        logger.info(
            "Registry initialized: sections=%d tasks=%d",
            self.section_count(),
            self.task_count(),
        )

    # ---- sections ----

    def add_section(self, name: str) -> bool:
        if name in self._sections:
            logger.debug("Section %r already exists in memory", name)
            return True

        section_id = self._repo.save_section(name)
        if section_id is None:
            logger.warning("Failed to add section %r to store", name)
            return False

        self._sections[name] = Section(name)
        logger.info("Section %r added (id=%s)", name, section_id)
        return True

    def remove_section(self, name: str) -> bool:
        if not self._repo.delete_section(name):
            logger.warning("Failed to remove section %r from store (or it did not exist)", name)
            return False

        removed = self._sections.pop(name, None)
        logger.info(
            "Section %r removed with %d tasks", name, len(removed) if removed is not None else 0
        )
        return True

    # ---- tasks ----

    def add_task(self, section_name: str, task: Task) -> bool:
        if section_name not in self._sections and not self.add_section(section_name):
            logger.warning(
                "Cannot add task %r: section %r could not be created", task.name, section_name
            )
            return False

        task_id = self._repo.save_task(task, section_name)
        if task_id is None:
            logger.warning("Failed to add task %r to section %r", task.name, section_name)
            return False

        stored = Task(name=task.name, priority=task.priority, due_date=task.due_date, id=task_id)
        self._sections[section_name].add_task(stored)
        logger.info("Task %r added to section %r (id=%s)", task.name, section_name, task_id)
        return True

    def remove_task(self, section_name: str, task: Task) -> bool:
        """
        Remove the first task named `task.name` from the section (store first).

        The task must be present in memory; otherwise the store is not contacted,
        so a row the registry does not know about is never deleted.
        """
        section = self._sections.get(section_name)
        if section is None:
            logger.warning("Section %r not found in memory for task removal", section_name)
            return False

        if not any(t.name == task.name for t in section.tasks):
            logger.warning("Task %r not found in memory section %r", task.name, section_name)
            return False

        if not self._repo.delete_task(task.name, section_name):
            logger.warning(
                "Failed to remove task %r from section %r in store", task.name, section_name
            )
            return False

        section.remove_first_named(task.name)
        logger.info("Task %r removed from section %r", task.name, section_name)
        return True

    # ---- reads ----

    def list_section_names(self) -> list[str]:
        return list(self._sections)

    def list_tasks(self, section_name: str) -> tuple[Task, ...]:
        section = self._sections.get(section_name)
        return section.tasks if section is not None else ()

    def list_all_tasks(self) -> tuple[Task, ...]:
        return tuple(t for section in self._sections.values() for t in section.tasks)

    def search_by_name(self, term: str | None) -> tuple[Task, ...]:
        """
        Case-insensitive substring search over task names.

        A blank term returns nothing (not everything).
        """
        if term is None or not term.strip():
            return ()
        needle = term.casefold()
        found = tuple(t for t in self.list_all_tasks() if needle in t.name.casefold())
        logger.debug("Search %r matched %d tasks", term, len(found))
        return found

    def sorted_by_due_date_then_priority(self) -> list[Task]:
        # sorted() is stable: equal keys keep list_all_tasks order.
        return sorted(self.list_all_tasks(), key=due_date_then_priority_key)

    # ---- counters ----

    def section_count(self) -> int:
        return len(self._sections)

    def task_count(self) -> int:
        return sum(len(s) for s in self._sections.values())
