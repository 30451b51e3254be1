# src/taskdeps/graph/async_engine.py

from __future__ import annotations

"""
Asyncio facade over DependencyEngine.

Store calls block, so every operation runs in a worker thread and the caller only
suspends at that boundary. Each call accepts a timeout (falling back to the configured
default) and can be cancelled like any coroutine.

Cancelling try_add_dependency never leaves a partial edge: if the worker has not written
yet it abandons before the insert; if the insert already started it completes. The worker
keeps the owner lock until it is done, so nothing interleaves with a cancelled add.
"""

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable
from typing import TypeVar

from ..core.errors import Result
from ..tasks.task_models import DependencyEdge, Task
from .assembler import DependencyGraph
from .cycle_guard import EdgeCheck
from .engine import BulkAddResult, DependencyEngine
from .layout import GraphLayout
from .path_finder import PathResult
from .readiness import StartCheck
from .repository import TaskDependencies

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _log_abandoned(fut: asyncio.Future) -> None:
    if fut.cancelled():
        return
    exc = fut.exception()
    if exc is not None:
        logger.error("Abandoned dependency write failed", exc_info=exc)
        return
    res = fut.result()
    if isinstance(res, Result):
        logger.info("Abandoned dependency write finished ok=%s", res.ok)


class AsyncDependencyEngine:
    def __init__(self, engine: DependencyEngine, *, default_timeout: float | None = None) -> None:
        self._engine = engine
        self._default_timeout = default_timeout

    @property
    def engine(self) -> DependencyEngine:
        return self._engine

    def _timeout(self, timeout: float | None) -> float | None:
        return self._default_timeout if timeout is None else timeout

    async def _run(self, fn: Callable[..., T], *args, timeout: float | None = None, **kwargs) -> T:
        async with asyncio.timeout(self._timeout(timeout)):
            return await asyncio.to_thread(fn, *args, **kwargs)

    # ---- mutation ----

    async def try_add_dependency(
        self,
        task_id: str,
        depends_on_task_id: str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> Result[DependencyEdge]:
        cancel = threading.Event()
        call = asyncio.ensure_future(
            asyncio.to_thread(
                self._engine.try_add_dependency,
                task_id,
                depends_on_task_id,
                owner_id=owner_id,
                cancel=cancel,
            )
        )
        try:
            async with asyncio.timeout(self._timeout(timeout)):
                return await asyncio.shield(call)
        except (asyncio.CancelledError, TimeoutError):
            cancel.set()
            call.add_done_callback(_log_abandoned)
            logger.info("try_add_dependency %s -> %s cancelled by caller", task_id, depends_on_task_id)
            raise

    async def can_add_dependency(
        self,
        task_id: str,
        depends_on_task_id: str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> EdgeCheck:
        return await self._run(
            self._engine.can_add_dependency,
            task_id,
            depends_on_task_id,
            owner_id=owner_id,
            timeout=timeout,
        )

    async def remove_dependency(
        self, task_id: str, depends_on_task_id: str, *, timeout: float | None = None
    ) -> Result[None]:
        return await self._run(self._engine.remove_dependency, task_id, depends_on_task_id, timeout=timeout)

    async def bulk_add_dependencies(
        self,
        pairs: Iterable[tuple[str, str]],
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> BulkAddResult:
        out = BulkAddResult()
        for task_id, depends_on_task_id in list(pairs):
            res = await self.try_add_dependency(task_id, depends_on_task_id, owner_id=owner_id, timeout=timeout)
            if res.error is not None:
                out.errors.append(((task_id, depends_on_task_id), res.error))
            elif res.value is not None:
                out.results.append(res.value)
        return out

    # ---- reads ----

    async def get_dependency_graph(self, owner_id: str, *, timeout: float | None = None) -> DependencyGraph:
        return await self._run(self._engine.get_dependency_graph, owner_id, timeout=timeout)

    async def get_graph_layout(
        self,
        owner_id: str,
        *,
        viewport_width: float | None = None,
        compact: bool | None = None,
        timeout: float | None = None,
    ) -> GraphLayout:
        return await self._run(
            self._engine.get_graph_layout,
            owner_id,
            viewport_width=viewport_width,
            compact=compact,
            timeout=timeout,
        )

    async def get_ready_tasks(self, owner_id: str, *, timeout: float | None = None) -> list[Task]:
        return await self._run(self._engine.get_ready_tasks, owner_id, timeout=timeout)

    async def can_start(self, task_id: str, *, timeout: float | None = None) -> Result[StartCheck]:
        return await self._run(self._engine.can_start, task_id, timeout=timeout)

    async def find_dependency_path(
        self, from_task_id: str, to_task_id: str, *, timeout: float | None = None
    ) -> Result[PathResult]:
        return await self._run(self._engine.find_dependency_path, from_task_id, to_task_id, timeout=timeout)

    async def get_task_dependencies(
        self, task_id: str, *, timeout: float | None = None
    ) -> Result[TaskDependencies]:
        return await self._run(self._engine.get_task_dependencies, task_id, timeout=timeout)
