# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_organizer.core.state import AppState
from task_organizer.tasks.task_registry import TaskRegistry
from task_organizer.tasks.task_store import SectionTaskStore

from .fakes import FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    A SimpleNamespace rather than the real config keeps tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="task-organizer-test",
        log_level="DEBUG",
        console_enabled=True,
        date_input_format="%Y-%m-%d",
        date_display_format="%Y-%m-%d",
        data_dir=tmp_path,
        db_path=tmp_path / "tasks.sqlite3",
        db_timeout_seconds=5.0,
    )


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def registry(repo: FakeTaskRepo) -> TaskRegistry:
    reg = TaskRegistry(repo)
    reg.initialize()
    return reg


@pytest.fixture()
def store(settings: SimpleNamespace) -> SectionTaskStore:
    return SectionTaskStore(settings.db_path, timeout=settings.db_timeout_seconds)


@pytest.fixture()
def state(settings: SimpleNamespace, store: SectionTaskStore) -> AppState:
    """
    AppState wired to a real SQLite store in tmp_path.
    """
    reg = TaskRegistry(store)
    reg.initialize()
    return AppState(settings=settings, registry=reg, store=store)
