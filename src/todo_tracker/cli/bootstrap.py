# src/todo_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend and wires the TaskManager into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.kv_store import MemoryKeyValueStore, SqliteKeyValueStore
from ..tasks.task_manager import TaskManager

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> KeyValueStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    namespace = str(getattr(settings, "storage_namespace", "todos"))
    if backend == "memory":
        logger.warning("Using in-memory storage: tasks will not survive a restart.")
        return MemoryKeyValueStore(namespace=namespace)
    return SqliteKeyValueStore(settings.storage_path, namespace=namespace)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = create_storage(settings)
    return AppState(
        settings=settings,
        storage=storage,
        manager=TaskManager(storage),
    )
