# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_tracker.core.state import AppState
from todo_tracker.storage.kv_store import MemoryKeyValueStore
from todo_tracker.tasks.task_manager import TaskManager

from .fakes import FixedClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "todos.sqlite3",
        storage_namespace="todos",
        confirm_destructive=True,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def manager(storage: MemoryKeyValueStore, clock: FixedClock) -> TaskManager:
    return TaskManager(storage, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, storage: MemoryKeyValueStore, manager: TaskManager) -> AppState:
    return AppState(settings=settings, storage=storage, manager=manager)
