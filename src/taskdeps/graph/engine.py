# src/taskdeps/graph/engine.py

from __future__ import annotations

"""
Dependency engine facade.

The only entry point callers (UI, automation rules, status-transition guards) use.
Typed DependencyErrors are turned into Result values here and never escape;
unexpected store failures are logged and propagate.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.errors import DependencyError, NotFoundError, Result
from ..core.ports import TaskEdgeStore
from ..tasks.task_models import DependencyEdge, Task
from .assembler import DependencyGraph, build_graph
from .cycle_guard import CycleGuard, EdgeCheck, OwnerLocks
from .layering import layer_graph
from .layout import GraphLayout, compute_layout
from .path_finder import PathFinder, PathResult
from .readiness import ReadinessEvaluator, StartCheck
from .repository import DependencyRepository, TaskDependencies

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BulkAddResult:
    results: list[DependencyEdge] = field(default_factory=list)
    errors: list[tuple[tuple[str, str], DependencyError]] = field(default_factory=list)


class DependencyEngine:
    def __init__(
        self,
        store: TaskEdgeStore,
        *,
        verify_after_write: bool = True,
        layout_viewport_width: float = 0,
        layout_compact: bool = False,
    ) -> None:
        self._repo = DependencyRepository(store)
        self._guard = CycleGuard(self._repo, locks=OwnerLocks(), verify_after_write=verify_after_write)
        self._readiness = ReadinessEvaluator(self._repo)
        self._paths = PathFinder(self._repo)
        self._layout_viewport_width = layout_viewport_width
        self._layout_compact = layout_compact

    @property
    def repository(self) -> DependencyRepository:
        return self._repo

    # ---- mutation ----

    def try_add_dependency(
        self,
        task_id: str,
        depends_on_task_id: str,
        *,
        owner_id: str | None = None,
        cancel: threading.Event | None = None,
    ) -> Result[DependencyEdge]:
        try:
            edge = self._guard.add_edge(task_id, depends_on_task_id, owner_id=owner_id, cancel=cancel)
        except DependencyError as e:
            logger.info("Dependency rejected %s -> %s kind=%s", task_id, depends_on_task_id, e.kind.value)
            return Result.failure(e)
        except Exception:
            logger.exception("try_add_dependency failed %s -> %s", task_id, depends_on_task_id)
            raise
        return Result.success(edge)

    def can_add_dependency(self, task_id: str, depends_on_task_id: str, *, owner_id: str | None = None) -> EdgeCheck:
        return self._guard.can_add_edge(task_id, depends_on_task_id, owner_id=owner_id)

    def remove_dependency(self, task_id: str, depends_on_task_id: str) -> Result[None]:
        # No cycle implications; store-level atomicity is enough.
        if not self._repo.delete_edge(task_id, depends_on_task_id):
            return Result.failure(
                NotFoundError(task_id, f"Task {task_id} does not depend on task {depends_on_task_id}.")
            )
        logger.info("Dependency removed %s -> %s", task_id, depends_on_task_id)
        return Result.success(None)

    def bulk_add_dependencies(
        self,
        pairs: Iterable[tuple[str, str]],
        *,
        owner_id: str | None = None,
    ) -> BulkAddResult:
        out = BulkAddResult()
        for task_id, depends_on_task_id in pairs:
            res = self.try_add_dependency(task_id, depends_on_task_id, owner_id=owner_id)
            if res.error is not None:
                out.errors.append(((task_id, depends_on_task_id), res.error))
            elif res.value is not None:
                out.results.append(res.value)
        return out

    # ---- reads ----

    def get_dependency_graph(self, owner_id: str) -> DependencyGraph:
        return layer_graph(build_graph(self._repo, owner_id))

    def get_graph_layout(
        self,
        owner_id: str,
        *,
        viewport_width: float | None = None,
        compact: bool | None = None,
    ) -> GraphLayout:
        graph = self.get_dependency_graph(owner_id)
        return compute_layout(
            graph.levels,
            graph.edges,
            viewport_width=self._layout_viewport_width if viewport_width is None else viewport_width,
            compact=self._layout_compact if compact is None else compact,
        )

    def get_ready_tasks(self, owner_id: str) -> list[Task]:
        return self._readiness.ready_tasks(owner_id)

    def can_start(self, task_id: str) -> Result[StartCheck]:
        try:
            return Result.success(self._readiness.can_start(task_id))
        except DependencyError as e:
            return Result.failure(e)

    def find_dependency_path(self, from_task_id: str, to_task_id: str) -> Result[PathResult]:
        try:
            return Result.success(self._paths.find_path(from_task_id, to_task_id))
        except DependencyError as e:
            return Result.failure(e)

    def get_task_dependencies(self, task_id: str) -> Result[TaskDependencies]:
        try:
            self._repo.require_task(task_id)
        except DependencyError as e:
            return Result.failure(e)
        return Result.success(self._repo.task_dependencies(task_id))
