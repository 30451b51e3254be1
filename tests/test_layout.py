# tests/test_layout.py

from __future__ import annotations

from taskdeps.graph.assembler import GraphEdge, GraphNode
from taskdeps.graph.engine import DependencyEngine
from taskdeps.graph.layout import compute_layout
from taskdeps.tasks.task_models import TaskPriority, TaskStatus

from .fakes import InMemoryTaskEdgeStore


def _node(node_id: str) -> GraphNode:
    return GraphNode(id=node_id, title=node_id, status=TaskStatus.PENDING, priority=TaskPriority.LOW, due_date=None)


def test_empty_levels_give_empty_layout() -> None:
    layout = compute_layout([], [])
    assert layout.nodes == [] and layout.connections == []
    assert (layout.width, layout.height) == (0, 0)
    assert (layout.node_width, layout.node_height) == (160, 80)


def test_chain_is_stacked_and_connected(engine: DependencyEngine, mem_store: InMemoryTaskEdgeStore) -> None:
    for tid in ("A", "B", "C"):
        mem_store.add(tid)
    engine.try_add_dependency("A", "B")
    engine.try_add_dependency("B", "C")

    layout = engine.get_graph_layout("u1")

    assert (layout.width, layout.height) == (190, 360)
    pos = {p.node.id: (p.x, p.y) for p in layout.nodes}
    assert pos == {"C": (95, 60), "B": (95, 180), "A": (95, 300)}

    conn = {c.id: c for c in layout.connections}
    assert set(conn) == {"C-B", "B-A"}
    cb = conn["C-B"]
    assert (cb.from_x, cb.from_y, cb.to_x, cb.to_y) == (95, 100, 95, 140)


def test_levels_are_centred_in_the_viewport() -> None:
    levels = [[_node("L"), _node("R")], [_node("T")]]
    edges = [GraphEdge("L", "T"), GraphEdge("R", "T"), GraphEdge("L", "ghost")]

    layout = compute_layout(levels, edges, viewport_width=400)

    assert layout.width == 380
    pos = {p.node.id: p.x for p in layout.nodes}
    assert pos["L"] == 95
    assert pos["R"] == 285
    assert pos["T"] == 190
    # Edges with an endpoint outside the levels get no connection line.
    assert {c.id for c in layout.connections} == {"L-T", "R-T"}


def test_compact_metrics() -> None:
    layout = compute_layout([[_node("X")]], [], compact=True)
    assert (layout.node_width, layout.node_height) == (120, 60)
    assert layout.width == 140 and layout.height == 100
    only = layout.nodes[0]
    assert (only.x, only.y) == (70, 50)
