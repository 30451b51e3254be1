# src/taskdeps/graph/path_finder.py

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ..core.errors import NotFoundError
from ..tasks.task_models import Task
from .repository import DependencyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PathResult:
    has_path: bool
    path: list[Task] = field(default_factory=list)

    # Edge count; -1 when there is no path.
    length: int = -1


def shortest_downstream_path(
    from_task_id: str,
    to_task_id: str,
    dependents_of: Callable[[str], Iterable[str]],
) -> list[str] | None:
    """
    BFS from from_task_id over "is a prerequisite of" edges.

    Returns the id chain [from_task_id, ..., to_task_id] or None.
    """
    parent: dict[str, str | None] = {from_task_id: None}
    queue: deque[str] = deque([from_task_id])

    while queue:
        current = queue.popleft()
        for nxt in dependents_of(current):
            if nxt in parent:
                continue
            parent[nxt] = current
            if nxt == to_task_id:
                chain: list[str] = []
                node: str | None = nxt
                while node is not None:
                    chain.append(node)
                    node = parent[node]
                chain.reverse()
                return chain
            queue.append(nxt)

    return None


class PathFinder:
    def __init__(self, repository: DependencyRepository) -> None:
        self._repo = repository

    def find_path(self, from_task_id: str, to_task_id: str) -> PathResult:
        """Raises NotFoundError when either endpoint is unknown, or a task on the path is deleted mid-query."""
        if from_task_id == to_task_id:
            return PathResult(has_path=True, path=[], length=0)

        self._repo.require_task(from_task_id)
        self._repo.require_task(to_task_id)

        chain = shortest_downstream_path(from_task_id, to_task_id, self._repo.dependent_ids)
        if chain is None:
            logger.debug("No dependency path %s -> %s", from_task_id, to_task_id)
            return PathResult(has_path=False, path=[], length=-1)

        by_id = self._repo.tasks_by_ids(chain)
        gone = [i for i in chain if i not in by_id]
        if gone:
            raise NotFoundError(gone[0])
        path = [by_id[i] for i in chain]
        return PathResult(has_path=True, path=path, length=len(path) - 1)
