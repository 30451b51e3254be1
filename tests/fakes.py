# tests/fakes.py

from __future__ import annotations

import threading
import time
from dataclasses import replace

from taskdeps.core.ports import StoreConflictError, StoreMissingTaskError
from taskdeps.tasks.task_models import DependencyEdge, Task, TaskPriority, TaskStatus


class InMemoryTaskEdgeStore:
    """
    Dict-backed TaskEdgeStore.

    Keeps the algorithms' tests free of SQLite; enforces the same unique and endpoint constraints.
    """

    def __init__(self) -> None:
        self.tasks: dict[str, Task] = {}
        self.edges: dict[tuple[str, str], DependencyEdge] = {}
        self.inserts = 0
        self._next_edge_id = 1
        self._lock = threading.Lock()

    # ---- helpers ----

    def add(
        self,
        task_id: str,
        *,
        owner_id: str = "u1",
        status: TaskStatus = TaskStatus.PENDING,
        priority: TaskPriority = TaskPriority.MEDIUM,
        parent_task_id: str | None = None,
        title: str | None = None,
    ) -> Task:
        task = Task(
            id=task_id,
            owner_id=owner_id,
            title=title or f"Task {task_id}",
            status=status,
            priority=priority,
            parent_task_id=parent_task_id,
            created_at=float(len(self.tasks)),
            updated_at=float(len(self.tasks)),
        )
        self.tasks[task_id] = task
        return task

    def set_status(self, task_id: str, status: TaskStatus) -> None:
        self.tasks[task_id] = replace(self.tasks[task_id], status=status)

    def link(self, task_id: str, depends_on_task_id: str) -> None:
        """Write an edge directly, bypassing the engine (simulates another writer)."""
        self.edges[(task_id, depends_on_task_id)] = DependencyEdge(task_id, depends_on_task_id)

    # ---- TaskEdgeStore port ----

    def get_tasks_by_owner(self, owner_id: str, *, exclude_subtasks: bool = True) -> list[Task]:
        out = [t for t in self.tasks.values() if t.owner_id == owner_id]
        if exclude_subtasks:
            out = [t for t in out if t.parent_task_id is None]
        return sorted(out, key=lambda t: (t.created_at, t.id))

    def get_task_by_id(self, task_id: str) -> Task | None:
        return self.tasks.get(task_id)

    def get_edges_by_task(self, task_id: str) -> list[DependencyEdge]:
        return [e for (t, _), e in list(self.edges.items()) if t == task_id]

    def get_edges_by_depends_on(self, task_id: str) -> list[DependencyEdge]:
        return [e for (_, d), e in list(self.edges.items()) if d == task_id]

    def insert_edge(self, task_id: str, depends_on_task_id: str) -> DependencyEdge:
        with self._lock:
            if task_id not in self.tasks or depends_on_task_id not in self.tasks:
                raise StoreMissingTaskError(task_id, depends_on_task_id)
            if (task_id, depends_on_task_id) in self.edges:
                raise StoreConflictError(task_id, depends_on_task_id)
            edge = DependencyEdge(task_id, depends_on_task_id, id=self._next_edge_id, created_at=time.time())
            self._next_edge_id += 1
            self.edges[(task_id, depends_on_task_id)] = edge
            self.inserts += 1
            return edge

    def delete_edge(self, task_id: str, depends_on_task_id: str) -> bool:
        with self._lock:
            return self.edges.pop((task_id, depends_on_task_id), None) is not None


class GatedStore(InMemoryTaskEdgeStore):
    """
    Store whose chosen operation blocks until `release` is set.

    `entered` is set when a call reaches the gate, so tests can time cancellation precisely.
    """

    def __init__(self, gate_on: str) -> None:
        super().__init__()
        self.gate_on = gate_on
        self.entered = threading.Event()
        self.release = threading.Event()
        self.armed = False

    def _gate(self, name: str) -> None:
        if self.armed and name == self.gate_on:
            self.entered.set()
            self.release.wait(timeout=5.0)

    def get_edges_by_task(self, task_id: str) -> list[DependencyEdge]:
        self._gate("get_edges_by_task")
        return super().get_edges_by_task(task_id)

    def insert_edge(self, task_id: str, depends_on_task_id: str) -> DependencyEdge:
        self._gate("insert_edge")
        return super().insert_edge(task_id, depends_on_task_id)
