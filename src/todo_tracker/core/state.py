# src/todo_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_manager import TaskManager
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings object (config.Settings or a compatible namespace in tests).
    settings: object

    storage: KeyValueStore
    manager: TaskManager

    # Console view tab: "active" or "history".
    current_tab: str = "active"
