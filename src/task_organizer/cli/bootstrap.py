# src/task_organizer/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store into the registry and performs the single startup load.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_registry import TaskRegistry
from ..tasks.task_store import SectionTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    A failed load leaves the registry empty; it never aborts startup.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SectionTaskStore(
        settings.db_path,
        timeout=getattr(settings, "db_timeout_seconds", 30.0),
    )
    registry = TaskRegistry(store)
    registry.initialize()

    return AppState(settings=settings, registry=registry, store=store)
