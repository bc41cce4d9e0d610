# src/todo_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


def utc_now_iso() -> str:
    """UTC timestamp in the persisted format, e.g. 2024-05-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TaskPhase(StrEnum):
    """
    Where a task sits in the two-phase completion workflow.

    - ACTIVE: in the working list, not checked
    - COMPLETED: checked but still in the working list (awaiting archival)
    - ARCHIVED: moved to history
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool
    created_at: str
    completed_at: str | None = None

    @property
    def phase(self) -> TaskPhase:
        if self.completed_at is not None:
            return TaskPhase.ARCHIVED
        if self.completed:
            return TaskPhase.COMPLETED
        return TaskPhase.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Build a Task from its persisted JSON shape.

        Raises ValueError for records that would break the task invariants
        (non-integer id, empty text).
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task record must be an object, got {type(raw).__name__}")

        tid = raw.get("id")
        # bool is an int subclass; a stored true/false is not an id.
        if not isinstance(tid, int) or isinstance(tid, bool) or tid < 1:
            raise ValueError(f"invalid task id: {tid!r}")

        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"task {tid} has empty text")

        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"task {tid} has non-boolean completed: {completed!r}")

        created_at = raw.get("createdAt")
        completed_at = raw.get("completedAt")

        return cls(
            id=tid,
            text=text.strip(),
            completed=completed,
            created_at=str(created_at) if created_at else "",
            completed_at=str(completed_at) if completed_at else None,
        )
