# src/taskdeps/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the dependency engine.

The engine depends on a Protocol instead of a concrete store.
The host application provides the storage; the bundled SQLite TaskStore is one implementation.
"""

from typing import Protocol

from ..tasks.task_models import DependencyEdge, Task


class StoreConflictError(RuntimeError):
    """Raised by a store when an insert violates the (task_id, depends_on_task_id) unique constraint."""

    def __init__(self, task_id: str, depends_on_task_id: str) -> None:
        super().__init__(f"edge already stored: {task_id} -> {depends_on_task_id}")
        self.task_id = task_id
        self.depends_on_task_id = depends_on_task_id


class StoreMissingTaskError(RuntimeError):
    """Raised by a store when an edge insert references a task that does not exist (anymore)."""

    def __init__(self, task_id: str, depends_on_task_id: str) -> None:
        super().__init__(f"edge endpoint missing: {task_id} -> {depends_on_task_id}")
        self.task_id = task_id
        self.depends_on_task_id = depends_on_task_id


class TaskEdgeStore(Protocol):
    # Task lookups (read-only for the engine)
    def get_tasks_by_owner(self, owner_id: str, *, exclude_subtasks: bool = True) -> list[Task]: ...
    def get_task_by_id(self, task_id: str) -> Task | None: ...

    # Edge lookups
    def get_edges_by_task(self, task_id: str) -> list[DependencyEdge]:
        """Edges where task_id is the dependent (its prerequisites)."""
        ...

    def get_edges_by_depends_on(self, task_id: str) -> list[DependencyEdge]:
        """Edges where task_id is the prerequisite (its dependents)."""
        ...

    # Edge mutation
    def insert_edge(self, task_id: str, depends_on_task_id: str) -> DependencyEdge: ...
    def delete_edge(self, task_id: str, depends_on_task_id: str) -> bool: ...
