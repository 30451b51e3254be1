# src/taskdeps/cli/bootstrap.py

"""
Composition root.

- loads settings once (or takes injected ones),
- ensures local (gitignored) directories exist,
- wires the SQLite TaskStore into the sync and async engine facades.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..graph.async_engine import AsyncDependencyEngine
from ..graph.engine import DependencyEngine
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(*, settings=None) -> TaskStore:
    if settings is None:
        settings = get_settings()
    _ensure_local_dirs(settings)
    return TaskStore(settings.tasks_db_path, timeout=settings.store_timeout_seconds)


def create_engine(*, settings=None, store=None) -> DependencyEngine:
    """
    Build a DependencyEngine from settings.

    Settings stay injectable so tests never read the process environment.
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = create_store(settings=settings)

    engine = DependencyEngine(
        store,
        verify_after_write=settings.verify_after_write,
        layout_viewport_width=settings.layout_viewport_width,
        layout_compact=settings.layout_compact,
    )
    logger.debug("DependencyEngine created db=%s", getattr(settings, "tasks_db_path", None))
    return engine


def create_async_engine(*, settings=None, store=None) -> AsyncDependencyEngine:
    if settings is None:
        settings = get_settings()
    engine = create_engine(settings=settings, store=store)
    return AsyncDependencyEngine(engine, default_timeout=settings.query_timeout_seconds)
