# tests/test_path_finder.py

from __future__ import annotations

from collections.abc import Iterable

from taskdeps.core.errors import NotFoundError
from taskdeps.graph.engine import DependencyEngine
from taskdeps.graph.path_finder import shortest_downstream_path

from .fakes import InMemoryTaskEdgeStore


def _engine_with(edges: list[tuple[str, str]], ids: Iterable[str]) -> tuple[DependencyEngine, InMemoryTaskEdgeStore]:
    s = InMemoryTaskEdgeStore()
    for tid in ids:
        s.add(tid)
    engine = DependencyEngine(s)
    for task_id, dep in edges:
        assert engine.try_add_dependency(task_id, dep).ok
    return engine, s


def test_same_task_has_empty_path() -> None:
    engine, _ = _engine_with([], "X")
    res = engine.find_dependency_path("X", "X").unwrap()
    assert res.has_path
    assert res.length == 0
    assert res.path == []


def test_disconnected_tasks() -> None:
    engine, _ = _engine_with([], "XY")
    res = engine.find_dependency_path("X", "Y").unwrap()
    assert not res.has_path
    assert res.length == -1
    assert res.path == []


def test_walks_downstream_consumers_only() -> None:
    # C is the prerequisite of B, B of A: C -> B -> A downstream.
    engine, _ = _engine_with([("A", "B"), ("B", "C")], "ABC")

    down = engine.find_dependency_path("C", "A").unwrap()
    assert down.has_path
    assert down.length == 2
    assert [t.id for t in down.path] == ["C", "B", "A"]

    up = engine.find_dependency_path("A", "C").unwrap()
    assert not up.has_path


def test_shortest_chain_wins() -> None:
    # S feeds E directly and through M1 -> M2.
    engine, _ = _engine_with([("E", "S"), ("M1", "S"), ("M2", "M1"), ("E", "M2")], ["S", "M1", "M2", "E"])
    res = engine.find_dependency_path("S", "E").unwrap()
    assert res.length == 1
    assert [t.id for t in res.path] == ["S", "E"]


def test_unknown_endpoints_are_not_found() -> None:
    engine, _ = _engine_with([], "X")
    assert isinstance(engine.find_dependency_path("X", "nope").error, NotFoundError)
    assert isinstance(engine.find_dependency_path("nope", "X").error, NotFoundError)


def test_task_deleted_during_search_is_not_found() -> None:
    class VanishingStore(InMemoryTaskEdgeStore):
        def get_edges_by_depends_on(self, task_id):
            edges = super().get_edges_by_depends_on(task_id)
            if task_id == "B":
                # B is removed by another client once the search has walked past it.
                self.tasks.pop("B", None)
            return edges

    s = VanishingStore()
    for tid in ("A", "B", "C"):
        s.add(tid)
    engine = DependencyEngine(s)
    assert engine.try_add_dependency("A", "B").ok
    assert engine.try_add_dependency("B", "C").ok

    res = engine.find_dependency_path("C", "A")

    assert isinstance(res.error, NotFoundError)
    assert res.error.task_id == "B"


def test_bfs_terminates_on_cyclic_adjacency() -> None:
    dependents = {"A": ["B"], "B": ["A"], "C": []}
    assert shortest_downstream_path("A", "C", lambda n: dependents[n]) is None
    assert shortest_downstream_path("A", "B", lambda n: dependents[n]) == ["A", "B"]
