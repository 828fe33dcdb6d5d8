# src/task_organizer/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_registry import TaskRegistry


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: Any

    registry: TaskRegistry
    store: Any = None
