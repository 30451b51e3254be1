# src/taskdeps/graph/repository.py

from __future__ import annotations

"""
Dependency repository.

Thin adapter over the TaskEdgeStore port. It shapes store results for the graph
algorithms (id lists, edges restricted to a node set) and centralizes owner checks.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.errors import NotFoundError
from ..core.ports import TaskEdgeStore
from ..tasks.task_models import DependencyEdge, Task

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TaskDependencies:
    """Both directions of one task's edges plus the resolved task records."""

    dependencies: list[DependencyEdge] = field(default_factory=list)
    dependents: list[DependencyEdge] = field(default_factory=list)
    prerequisite_tasks: list[Task] = field(default_factory=list)
    dependent_tasks: list[Task] = field(default_factory=list)


class DependencyRepository:
    def __init__(self, store: TaskEdgeStore) -> None:
        self._store = store

    @property
    def store(self) -> TaskEdgeStore:
        return self._store

    # ---- tasks ----

    def get_task(self, task_id: str) -> Task | None:
        return self._store.get_task_by_id(task_id)

    def require_task(self, task_id: str, *, owner_id: str | None = None) -> Task:
        """
        Fetch a task or raise NotFoundError.

        A task owned by somebody else is reported exactly like a missing one.
        """
        task = self._store.get_task_by_id(task_id)
        if task is None:
            raise NotFoundError(task_id)
        if owner_id is not None and task.owner_id != owner_id:
            raise NotFoundError(task_id)
        return task

    def tasks_for_owner(self, owner_id: str, *, exclude_subtasks: bool = True) -> list[Task]:
        return self._store.get_tasks_by_owner(owner_id, exclude_subtasks=exclude_subtasks)

    def tasks_by_ids(self, task_ids: Iterable[str]) -> dict[str, Task]:
        """Resolve ids to tasks, skipping ids the store no longer knows."""
        out: dict[str, Task] = {}
        for task_id in task_ids:
            if task_id in out:
                continue
            task = self._store.get_task_by_id(task_id)
            if task is not None:
                out[task_id] = task
        return out

    # ---- adjacency ----

    def prerequisite_ids(self, task_id: str) -> list[str]:
        """Ids that task_id depends on."""
        return [e.depends_on_task_id for e in self._store.get_edges_by_task(task_id)]

    def dependent_ids(self, task_id: str) -> list[str]:
        """Ids that depend on task_id."""
        return [e.task_id for e in self._store.get_edges_by_depends_on(task_id)]

    def edge_exists(self, task_id: str, depends_on_task_id: str) -> bool:
        return depends_on_task_id in self.prerequisite_ids(task_id)

    def edges_within(self, node_ids: Iterable[str]) -> list[DependencyEdge]:
        """All edges whose both endpoints are in node_ids."""
        ids = set(node_ids)
        out: list[DependencyEdge] = []
        dropped = 0
        for task_id in ids:
            for edge in self._store.get_edges_by_task(task_id):
                if edge.depends_on_task_id in ids:
                    out.append(edge)
                else:
                    dropped += 1
        if dropped:
            logger.debug("Dropped %d edge(s) pointing outside the node set", dropped)
        out.sort(key=lambda e: (e.depends_on_task_id, e.task_id))
        return out

    def task_dependencies(self, task_id: str) -> TaskDependencies:
        dependencies = self._store.get_edges_by_task(task_id)
        dependents = self._store.get_edges_by_depends_on(task_id)

        prereqs = self.tasks_by_ids(e.depends_on_task_id for e in dependencies)
        deps = self.tasks_by_ids(e.task_id for e in dependents)

        return TaskDependencies(
            dependencies=dependencies,
            dependents=dependents,
            prerequisite_tasks=[prereqs[e.depends_on_task_id] for e in dependencies if e.depends_on_task_id in prereqs],
            dependent_tasks=[deps[e.task_id] for e in dependents if e.task_id in deps],
        )

    # ---- mutation ----

    def insert_edge(self, task_id: str, depends_on_task_id: str) -> DependencyEdge:
        return self._store.insert_edge(task_id, depends_on_task_id)

    def delete_edge(self, task_id: str, depends_on_task_id: str) -> bool:
        return self._store.delete_edge(task_id, depends_on_task_id)
