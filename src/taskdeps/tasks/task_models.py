# src/taskdeps/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """Task lifecycle status as stored by the host application."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    owner_id: str
    title: str
    status: TaskStatus
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str | None = None

    # Subtasks are kept out of the dependency graph view.
    parent_task_id: str | None = None

    created_at: float = 0.0
    updated_at: float = 0.0

    @property
    def is_subtask(self) -> bool:
        return self.parent_task_id is not None


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """
    `task_id` cannot be started until `depends_on_task_id` is completed.

    `id` and `created_at` are filled in by stores that track them.
    """

    task_id: str
    depends_on_task_id: str
    id: int | None = None
    created_at: float | None = None

    @property
    def pair(self) -> tuple[str, str]:
        return (self.task_id, self.depends_on_task_id)
