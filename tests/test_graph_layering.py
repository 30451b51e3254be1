# tests/test_graph_layering.py

from __future__ import annotations

from taskdeps.graph.assembler import GraphEdge, GraphNode, build_graph
from taskdeps.graph.engine import DependencyEngine
from taskdeps.graph.layering import layer
from taskdeps.graph.repository import DependencyRepository
from taskdeps.tasks.task_models import TaskPriority, TaskStatus

from .fakes import InMemoryTaskEdgeStore


def _node(node_id: str) -> GraphNode:
    return GraphNode(
        id=node_id,
        title=node_id,
        status=TaskStatus.PENDING,
        priority=TaskPriority.MEDIUM,
        due_date=None,
    )


def _ids(levels: list[list[GraphNode]]) -> list[list[str]]:
    return [[n.id for n in level] for level in levels]


def test_chain_layers_from_prerequisite_up(engine: DependencyEngine, mem_store: InMemoryTaskEdgeStore) -> None:
    for tid in ("A", "B", "C"):
        mem_store.add(tid)
    assert engine.try_add_dependency("A", "B").ok
    assert engine.try_add_dependency("B", "C").ok

    graph = engine.get_dependency_graph("u1")

    assert _ids(graph.levels) == [["C"], ["B"], ["A"]]
    assert not graph.cyclic
    assert {n.id: n.level for n in graph.nodes} == {"A": 2, "B": 1, "C": 0}
    assert {(e.from_id, e.to_id) for e in graph.edges} == {("B", "A"), ("C", "B")}


def test_level_is_longest_chain_not_first_parent() -> None:
    # D depends on A (short) and on C, which sits at the end of A -> B -> C.
    nodes = [_node(i) for i in ("A", "B", "C", "D")]
    edges = [
        GraphEdge("A", "D"),
        GraphEdge("A", "B"),
        GraphEdge("B", "C"),
        GraphEdge("C", "D"),
    ]

    result = layer(nodes, edges)

    assert result.level_of == {"A": 0, "B": 1, "C": 2, "D": 3}
    assert _ids(result.levels) == [["A"], ["B"], ["C"], ["D"]]


def test_diamond_and_isolated_nodes() -> None:
    nodes = [_node(i) for i in ("top", "left", "right", "bottom", "alone")]
    edges = [
        GraphEdge("bottom", "left"),
        GraphEdge("bottom", "right"),
        GraphEdge("left", "top"),
        GraphEdge("right", "top"),
    ]

    result = layer(nodes, edges)

    assert _ids(result.levels) == [["bottom", "alone"], ["left", "right"], ["top"]]
    assert all(n.level == i for i, level in enumerate(result.levels) for n in level)


def test_cyclic_input_terminates_and_is_flagged() -> None:
    nodes = [_node(i) for i in ("A", "B", "C", "D")]
    edges = [GraphEdge("A", "B"), GraphEdge("B", "C"), GraphEdge("C", "B"), GraphEdge("C", "D")]

    result = layer(nodes, edges)

    assert result.cyclic
    assert _ids(result.levels) == [["A"]]
    assert set(result.unplaced) == {"B", "C", "D"}


def test_empty_graph() -> None:
    result = layer([], [])
    assert result.levels == []
    assert not result.cyclic


def test_engine_graph_flags_cycle_written_around_the_guard(mem_store: InMemoryTaskEdgeStore) -> None:
    for tid in ("A", "B", "C"):
        mem_store.add(tid)
    mem_store.link("A", "B")
    mem_store.link("B", "A")

    graph = DependencyEngine(mem_store).get_dependency_graph("u1")

    assert graph.cyclic
    assert _ids(graph.levels) == [["C"]]
    assert {n.id: n.level for n in graph.nodes}["A"] is None


def test_assembler_drops_subtasks_and_foreign_edges(mem_store: InMemoryTaskEdgeStore) -> None:
    mem_store.add("P", status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH, title="Proposal")
    mem_store.add("Q")
    mem_store.add("S", parent_task_id="P")
    mem_store.add("F", owner_id="u2")
    mem_store.link("Q", "P")
    mem_store.link("Q", "S")
    mem_store.link("P", "F")

    graph = build_graph(DependencyRepository(mem_store), "u1")

    assert graph.node_ids() == ["P", "Q"]
    assert [(e.from_id, e.to_id, e.type) for e in graph.edges] == [("P", "Q", "dependency")]
    proposal = graph.nodes[0]
    assert proposal.title == "Proposal"
    assert proposal.status is TaskStatus.IN_PROGRESS
    assert proposal.priority is TaskPriority.HIGH
    assert graph.levels == []


def test_graph_for_owner_without_tasks(engine: DependencyEngine) -> None:
    graph = engine.get_dependency_graph("nobody")
    assert graph.nodes == [] and graph.edges == [] and graph.levels == []
