# src/task_organizer/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class Priority(StrEnum):
    """
    Task priority.

    The value is the textual form stored in the database.
    Ordering always goes through `rank`, never through declaration order.
    """

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        """Strict decode of the stored form; raises ValueError on unknown text."""
        if raw is None:
            raise ValueError("priority is NULL")
        return cls(raw)

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Lenient decode of user input (case/whitespace-insensitive)."""
        key = (raw or "").strip().upper()
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(p.value.lower() for p in cls)
            raise ValueError(f"Unknown priority {raw!r} (expected one of: {allowed})") from None


_PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MODERATE: 2,
    Priority.LOW: 1,
}


@dataclass(frozen=True, slots=True)
class Task:
    name: str
    priority: Priority
    due_date: date

    # Store identity; None until persisted.
    id: int | None = field(default=None, compare=False)

    def describe(self, date_format: str = "%b %d, %Y") -> str:
        return f"{self.name} (Priority: {self.priority.value} Due: {self.due_date.strftime(date_format)})"


@dataclass(slots=True)
class Section:
    """A named, ordered group of tasks. Tasks are appended newest-last."""

    name: str
    _tasks: list[Task] = field(default_factory=list, repr=False)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def add_task(self, task: Task) -> None:
        self._tasks.append(task)

    def remove_first_named(self, task_name: str) -> Task | None:
        for i, t in enumerate(self._tasks):
            if t.name == task_name:
                return self._tasks.pop(i)
        return None

    def __len__(self) -> int:
        return len(self._tasks)
