# src/taskdeps/graph/assembler.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..tasks.task_models import Task, TaskPriority, TaskStatus
from .repository import DependencyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GraphNode:
    id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    due_date: str | None
    level: int | None = None

    @classmethod
    def from_task(cls, task: Task) -> GraphNode:
        return cls(
            id=task.id,
            title=task.title,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
        )


@dataclass(frozen=True, slots=True)
class GraphEdge:
    """Oriented prerequisite -> dependent."""

    from_id: str
    to_id: str
    type: str = "dependency"


@dataclass(slots=True)
class DependencyGraph:
    """
    Query-scoped graph of one owner's top-level tasks.

    `levels` and `cyclic` are filled in by layering; the assembler leaves them empty.
    """

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    levels: list[list[GraphNode]] = field(default_factory=list)
    cyclic: bool = False

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]


def build_graph(repository: DependencyRepository, owner_id: str) -> DependencyGraph:
    """
    Fetch the owner's non-subordinate tasks and the edges among them.

    Edges touching subtasks or another owner's tasks cannot affect this layout and are dropped.
    """
    tasks = repository.tasks_for_owner(owner_id, exclude_subtasks=True)
    nodes = [GraphNode.from_task(t) for t in tasks]

    edges = [
        GraphEdge(from_id=e.depends_on_task_id, to_id=e.task_id)
        for e in repository.edges_within(n.id for n in nodes)
    ]

    logger.debug("Built graph owner=%s nodes=%d edges=%d", owner_id, len(nodes), len(edges))
    return DependencyGraph(nodes=nodes, edges=edges)
