# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeps.graph.engine import DependencyEngine
from taskdeps.tasks.task_store import TaskStore

from .fakes import InMemoryTaskEdgeStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeps-test",
        log_level="WARNING",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        log_dir=tmp_path / "logs",
        store_timeout_seconds=5.0,
        query_timeout_seconds=None,
        verify_after_write=True,
        layout_viewport_width=0.0,
        layout_compact=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """Real SQLite store: its constraints and cascades are part of what we test."""
    return TaskStore(settings.tasks_db_path, timeout=settings.store_timeout_seconds)


@pytest.fixture()
def mem_store() -> InMemoryTaskEdgeStore:
    return InMemoryTaskEdgeStore()


@pytest.fixture()
def engine(mem_store: InMemoryTaskEdgeStore) -> DependencyEngine:
    return DependencyEngine(mem_store)
