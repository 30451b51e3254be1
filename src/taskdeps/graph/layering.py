# src/taskdeps/graph/layering.py

from __future__ import annotations

"""
Topological layering (Kahn's algorithm).

A node's level is the length of the longest prerequisite chain ending at it:
every consumed edge raises the dependent's candidate level, and the level is only
final once the node's in-degree has dropped to zero.
"""

import logging
from collections import deque
from dataclasses import dataclass, field, replace

from .assembler import DependencyGraph, GraphEdge, GraphNode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LevelAssignment:
    level_of: dict[str, int] = field(default_factory=dict)
    levels: list[list[GraphNode]] = field(default_factory=list)

    # True when some nodes never reached in-degree 0 (the acyclicity invariant was bypassed).
    cyclic: bool = False
    unplaced: list[str] = field(default_factory=list)


def layer(nodes: list[GraphNode], edges: list[GraphEdge]) -> LevelAssignment:
    node_map = {n.id: n for n in nodes}
    in_degree: dict[str, int] = {n.id: 0 for n in nodes}
    adj: dict[str, list[str]] = {n.id: [] for n in nodes}

    for edge in edges:
        if edge.from_id not in node_map or edge.to_id not in node_map:
            continue
        adj[edge.from_id].append(edge.to_id)
        in_degree[edge.to_id] += 1

    queue: deque[str] = deque()
    candidate: dict[str, int] = {}
    for node_id, degree in in_degree.items():
        if degree == 0:
            queue.append(node_id)
            candidate[node_id] = 0

    level_of: dict[str, int] = {}
    while queue:
        current = queue.popleft()
        current_level = candidate[current]
        level_of[current] = current_level

        for nxt in adj[current]:
            candidate[nxt] = max(candidate.get(nxt, 0), current_level + 1)
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)

    levels: list[list[GraphNode]] = []
    for node in nodes:
        lvl = level_of.get(node.id)
        if lvl is None:
            continue
        while len(levels) <= lvl:
            levels.append([])
        levels[lvl].append(replace(node, level=lvl))

    unplaced = [n.id for n in nodes if n.id not in level_of]
    return LevelAssignment(level_of=level_of, levels=levels, cyclic=bool(unplaced), unplaced=unplaced)


def layer_graph(graph: DependencyGraph) -> DependencyGraph:
    """Return a copy of graph with levels, node levels and the cyclic flag filled in."""
    assignment = layer(graph.nodes, graph.edges)
    if assignment.cyclic:
        logger.warning(
            "Dependency graph is cyclic; %d node(s) left out of levels: %s",
            len(assignment.unplaced),
            ", ".join(assignment.unplaced),
        )

    nodes = [replace(n, level=assignment.level_of.get(n.id)) for n in graph.nodes]
    return DependencyGraph(
        nodes=nodes,
        edges=list(graph.edges),
        levels=assignment.levels,
        cyclic=assignment.cyclic,
    )
