# src/todo_tracker/tasks/task_manager.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..core.ports import ChangeListener, KeyValueStore
from .task_models import Task, utc_now_iso

logger = logging.getLogger(__name__)

# Persisted key names (kept stable across releases).
ACTIVE_KEY = "items"
ARCHIVED_KEY = "completedItems"
NEXT_ID_KEY = "nextId"


class TaskManager:
    """
    Owner of the task lists and the two-phase completion workflow.

    Phase 1: toggling a task only flips its `completed` flag; it stays active.
    Phase 2: archive_completed() moves every checked task into history.

    Every successful mutation runs the same cycle:
      mutate in memory -> persist all three keys -> notify listeners

    Views read `active` / `archived` (copies) and never touch Task objects
    owned by the manager.
    """

    def __init__(self, storage: KeyValueStore, *, clock: Callable[[], str] | None = None) -> None:
        self._storage = storage
        self._clock = clock or utc_now_iso
        self._listeners: list[ChangeListener] = []

        self._active: list[Task] = []
        self._archived: list[Task] = []
        self._next_id = 1
        self._load()

        logger.info(
            "TaskManager ready active=%d archived=%d next_id=%d",
            len(self._active),
            len(self._archived),
            self._next_id,
        )

    # ---- loading ----

    def _load(self) -> None:
        seen: set[int] = set()
        self._active = self._load_list(ACTIVE_KEY, seen)
        self._archived = self._load_list(ARCHIVED_KEY, seen)

        for task in self._active + self._archived:
            if not task.created_at:
                logger.warning("Task id=%s had no createdAt; stamping now.", task.id)
                task.created_at = self._clock()
        for task in self._active:
            if task.completed_at is not None:
                task.completed_at = None
        for task in self._archived:
            task.completed = True
            if task.completed_at is None:
                logger.warning("Archived task id=%s had no completedAt; stamping now.", task.id)
                task.completed_at = self._clock()

        raw_next = self._storage.load(NEXT_ID_KEY, 1)
        if isinstance(raw_next, int) and not isinstance(raw_next, bool) and raw_next >= 1:
            next_id = raw_next
        else:
            logger.warning("Ignoring invalid stored nextId=%r", raw_next)
            next_id = 1

        if seen and next_id <= max(seen):
            logger.warning("Stored nextId=%s is stale; raising to %s.", next_id, max(seen) + 1)
            next_id = max(seen) + 1
        self._next_id = next_id

    def _load_list(self, key: str, seen: set[int]) -> list[Task]:
        raw = self._storage.load(key, [])
        if not isinstance(raw, list):
            logger.warning("Stored %s is not a list; starting empty.", key)
            return []

        out: list[Task] = []
        for item in raw:
            try:
                task = Task.from_dict(item)
            except ValueError as e:
                logger.warning("Dropping malformed task in %s: %s", key, e)
                continue
            if task.id in seen:
                logger.warning("Dropping duplicate task id=%s in %s", task.id, key)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    # ---- change plumbing ----

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a zero-argument callback; called after every mutation."""
        self._listeners.append(listener)

    def _save(self) -> None:
        self._storage.save(ACTIVE_KEY, [t.to_dict() for t in self._active])
        self._storage.save(ARCHIVED_KEY, [t.to_dict() for t in self._archived])
        self._storage.save(NEXT_ID_KEY, self._next_id)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Change listener %r failed.", listener)

    def _commit(self) -> None:
        self._save()
        self._notify()

    # ---- lookups ----

    @staticmethod
    def _index_of(tasks: list[Task], task_id: int) -> int:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        return -1

    def _restore(self, index: int) -> Task:
        """Move archived[index] back to the end of the active list."""
        task = self._archived.pop(index)
        task.completed = False
        task.completed_at = None
        self._active.append(task)
        return task

    # ---- mutations ----

    def add_task(self, text: str) -> Task | None:
        clean = (text or "").strip()
        if not clean:
            return None

        task = Task(id=self._next_id, text=clean, completed=False, created_at=self._clock())
        self._next_id += 1
        self._active.append(task)
        logger.debug("Task added id=%s", task.id)
        self._commit()
        return replace(task)

    def toggle_completion(self, task_id: int) -> bool:
        """
        Flip the completed flag of an active task.

        If the id belongs to an archived task, the toggle reverts it instead
        (same effect as revert_task).
        """
        idx = self._index_of(self._active, task_id)
        if idx != -1:
            task = self._active[idx]
            task.completed = not task.completed
            logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
            self._commit()
            return True

        idx = self._index_of(self._archived, task_id)
        if idx != -1:
            self._restore(idx)
            logger.debug("Task reverted via toggle id=%s", task_id)
            self._commit()
            return True

        return False

    def delete_task(self, task_id: int) -> bool:
        """Delete from active, or else from history. Notifies only if something was removed."""
        for tasks in (self._active, self._archived):
            idx = self._index_of(tasks, task_id)
            if idx != -1:
                del tasks[idx]
                logger.debug("Task deleted id=%s", task_id)
                self._commit()
                return True
        return False

    def update_text(self, task_id: int, new_text: str) -> bool:
        # Archived text is read-only.
        clean = (new_text or "").strip()
        if not clean:
            return False
        idx = self._index_of(self._active, task_id)
        if idx == -1:
            return False
        self._active[idx].text = clean
        logger.debug("Task text updated id=%s", task_id)
        self._commit()
        return True

    def archive_completed(self) -> int:
        """Move every checked active task to history, preserving active order."""
        done = [t for t in self._active if t.completed]
        stamp = self._clock()
        for task in done:
            self._archived.append(replace(task, completed_at=stamp))
        self._active = [t for t in self._active if not t.completed]
        logger.debug("Archived %d task(s)", len(done))
        self._commit()
        return len(done)

    def clear_all(self) -> None:
        self._active = []
        self._archived = []
        logger.info("All tasks cleared.")
        self._commit()

    def clear_archived(self) -> None:
        self._archived = []
        logger.info("Task history cleared.")
        self._commit()

    def revert_task(self, task_id: int) -> bool:
        idx = self._index_of(self._archived, task_id)
        if idx == -1:
            return False
        self._restore(idx)
        logger.debug("Task reverted id=%s", task_id)
        self._commit()
        return True

    # ---- read-only views ----

    @property
    def active(self) -> list[Task]:
        return [replace(t) for t in self._active]

    @property
    def archived(self) -> list[Task]:
        return [replace(t) for t in self._archived]

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def active_count(self) -> int:
        return sum(1 for t in self._active if not t.completed)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self._active if t.completed)

    @property
    def archived_count(self) -> int:
        return len(self._archived)

    def get_task(self, task_id: int) -> Task | None:
        for tasks in (self._active, self._archived):
            idx = self._index_of(tasks, task_id)
            if idx != -1:
                return replace(tasks[idx])
        return None

    def snapshot(self) -> dict[str, Any]:
        """Persisted-shape dump of the whole state (used by diagnostics/tests)."""
        return {
            ACTIVE_KEY: [t.to_dict() for t in self._active],
            ARCHIVED_KEY: [t.to_dict() for t in self._archived],
            NEXT_ID_KEY: self._next_id,
        }
