# src/task_organizer/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from datetime import date
from pathlib import Path

from .task_models import Priority, Section, Task

logger = logging.getLogger(__name__)


class SectionTaskStore:
    """
    SQLite store for sections and their tasks.

    Contract:
    - never caches; every method opens its own connection and closes it on exit
    - never raises sqlite errors to the caller: failures are logged and reported
      as None / False / empty results
    - tasks are removed together with their section by ON DELETE CASCADE
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = float(timeout)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._ensure_schema()
        except sqlite3.Error:
            logger.exception("Failed to initialize schema db=%s", self._db_path)
        logger.info(
            "SectionTaskStore ready db=%s sections=%s tasks=%s",
            self._db_path,
            self.count_sections(),
            self.count_tasks(),
        )

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        try:
            self._configure_conn(conn)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        # Cascade deletes only work with foreign keys enabled per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS sections (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    priority TEXT NOT NULL,
                    due_date TEXT NOT NULL,
                    section_id INTEGER NOT NULL
                        REFERENCES sections(id) ON DELETE CASCADE
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_section ON tasks(section_id, name)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            name=str(row["name"]),
            priority=Priority.from_db(row["priority"]),
            due_date=date.fromisoformat(str(row["due_date"])),
            id=int(row["id"]),
        )

    def _count(self, table: str) -> int:
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for count of %s", table)
            return -1
        try:
            (n,) = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
            return int(n)
        except sqlite3.Error:
            logger.exception("Failed to count rows in %s", table)
            return -1
        finally:
            conn.close()

    # ---- public API ----

    def count_sections(self) -> int:
        return self._count("sections")

    def count_tasks(self) -> int:
        return self._count("tasks")

    def save_section(self, name: str) -> int | None:
        """
        Insert a section if absent.

        Returns the new row id, or None when nothing was inserted
        (duplicate name or store error).
        """
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for save_section name=%r", name)
            return None
        try:
            cur = conn.execute("INSERT OR IGNORE INTO sections(name) VALUES (?)", (name,))
            conn.commit()
            if cur.rowcount < 1 or cur.lastrowid is None:
                logger.warning("Section not inserted (already exists?) name=%r", name)
                return None
            section_id = int(cur.lastrowid)
            logger.debug("Section saved id=%s name=%r", section_id, name)
            return section_id
        except sqlite3.Error:
            logger.exception("Error saving section name=%r", name)
            return None
        finally:
            conn.close()

    def load_all_sections(self) -> dict[str, Section]:
        """All sections (without tasks) in insertion order."""
        sections: dict[str, Section] = {}
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for load_all_sections")
            return sections
        try:
            for row in conn.execute("SELECT id, name FROM sections ORDER BY id ASC"):
                name = str(row["name"])
                sections[name] = Section(name)
        except sqlite3.Error:
            logger.exception("Error loading sections")
        finally:
            conn.close()
        return sections

    def delete_section(self, name: str) -> bool:
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for delete_section name=%r", name)
            return False
        try:
            cur = conn.execute("DELETE FROM sections WHERE name = ?", (name,))
            conn.commit()
            return cur.rowcount > 0
        except sqlite3.Error:
            logger.exception("Error deleting section name=%r", name)
            return False
        finally:
            conn.close()

    def save_task(self, task: Task, section_name: str) -> int | None:
        """
        Insert a task row under the named section.

        Always inserts (there is no update path). Returns the new row id or None.
        """
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for save_task name=%r", task.name)
            return None
        try:
            row = conn.execute(
                "SELECT id FROM sections WHERE name = ?", (section_name,)
            ).fetchone()
            if row is None:
                logger.warning(
                    "Section %r not found when saving task %r", section_name, task.name
                )
                return None

            cur = conn.execute(
                """
                INSERT INTO tasks(name, priority, due_date, section_id)
                VALUES (?, ?, ?, ?)
                """,
                (task.name, task.priority.value, task.due_date.isoformat(), int(row["id"])),
            )
            conn.commit()
            if cur.lastrowid is None:
                logger.warning("SQLite did not return lastrowid for task %r", task.name)
                return None
            task_id = int(cur.lastrowid)
            logger.debug(
                "Task saved id=%s name=%r section=%r priority=%s due=%s",
                task_id,
                task.name,
                section_name,
                task.priority.value,
                task.due_date.isoformat(),
            )
            return task_id
        except sqlite3.Error:
            logger.exception("Error saving task %r in section %r", task.name, section_name)
            return None
        finally:
            conn.close()

    def load_tasks_for_section(self, name: str) -> list[Task] | None:
        """
        Tasks of one section in insertion order.

        Rows with an unknown priority or unreadable date are logged and skipped.
        Returns None if the query itself failed.
        """
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for load_tasks_for_section name=%r", name)
            return None
        try:
            rows = conn.execute(
                """
                SELECT t.id, t.name, t.priority, t.due_date
                FROM tasks t
                JOIN sections s ON t.section_id = s.id
                WHERE s.name = ?
                ORDER BY t.id ASC
                """,
                (name,),
            ).fetchall()
        except sqlite3.Error:
            logger.exception("Error loading tasks for section %r", name)
            return None
        finally:
            conn.close()

        tasks: list[Task] = []
        for row in rows:
            try:
                tasks.append(self._row_to_task(row))
            except ValueError as e:
                logger.warning(
                    "Skipping malformed task row id=%s section=%r: %s", row["id"], name, e
                )
        return tasks

    def delete_task(self, task_name: str, section_name: str) -> bool:
        """
        Delete ONE task matching (task name, section name): the oldest such row
        among those load_tasks_for_section would return. Malformed rows are never
        picked, so the deleted row is the first same-named task the registry holds.
        """
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Store unavailable for delete_task name=%r", task_name)
            return False
        known = [p.value for p in Priority]
        placeholders = ",".join("?" for _ in known)
        try:
            cur = conn.execute(
                f"""
                DELETE FROM tasks
                WHERE id = (
                    SELECT MIN(t.id)
                    FROM tasks t
                    JOIN sections s ON t.section_id = s.id
                    WHERE t.name = ? AND s.name = ?
                      AND t.priority IN ({placeholders})
                      AND date(t.due_date) = t.due_date
                )
                """,
                (task_name, section_name, *known),
            )
            conn.commit()
            return cur.rowcount > 0
        except sqlite3.Error:
            logger.exception(
                "Error deleting task %r from section %r", task_name, section_name
            )
            return False
        finally:
            conn.close()
