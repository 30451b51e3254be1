# src/taskdeps/graph/cycle_guard.py

from __future__ import annotations

"""
Cycle guard.

Validates a candidate edge "task_id depends on depends_on_task_id" and writes it.

The edge closes a loop iff task_id is already reachable from depends_on_task_id by following
existing "X depends on Y" edges from X to Y. That targeted reachability test is what runs here;
checking whether the current graph happens to contain some cycle is not enough.

Check + insert run under a per-owner lock so two concurrent inserts cannot each pass the check
against a graph that becomes cyclic once both are applied.
"""

import logging
import threading
import weakref
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from ..core.errors import (
    AddCancelledError,
    ConcurrencyError,
    CycleError,
    DependencyError,
    DuplicateError,
    NotFoundError,
    SelfLoopError,
)
from ..core.ports import StoreConflictError, StoreMissingTaskError
from ..tasks.task_models import DependencyEdge
from .repository import DependencyRepository

logger = logging.getLogger(__name__)


class RejectReason(StrEnum):
    SELF_LOOP = "self-loop"
    NOT_FOUND = "not-found"
    DUPLICATE = "duplicate"
    CYCLE = "cycle"


_REASONS: dict[type[DependencyError], RejectReason] = {
    SelfLoopError: RejectReason.SELF_LOOP,
    NotFoundError: RejectReason.NOT_FOUND,
    DuplicateError: RejectReason.DUPLICATE,
    CycleError: RejectReason.CYCLE,
}


@dataclass(frozen=True, slots=True)
class EdgeCheck:
    allowed: bool
    reason: RejectReason | None = None
    message: str = ""
    cycle_path: list[str] = field(default_factory=list)


def find_cycle_path(
    task_id: str,
    depends_on_task_id: str,
    prerequisites_of: Callable[[str], Iterable[str]],
) -> list[str] | None:
    """
    BFS from depends_on_task_id along prerequisite edges looking for task_id.

    Returns the loop the new edge would close, starting and ending at task_id
    ([task_id, depends_on_task_id, ..., task_id]), or None when the edge is safe.
    """
    if task_id == depends_on_task_id:
        return [task_id, task_id]

    parent: dict[str, str | None] = {depends_on_task_id: None}
    queue: deque[str] = deque([depends_on_task_id])

    while queue:
        current = queue.popleft()
        for nxt in prerequisites_of(current):
            if nxt in parent:
                continue
            parent[nxt] = current
            if nxt == task_id:
                chain: list[str] = []
                node: str | None = nxt
                while node is not None:
                    chain.append(node)
                    node = parent[node]
                chain.reverse()
                return [task_id, *chain]
            queue.append(nxt)

    return None


class OwnerLocks:
    """
    Lazily created threading.Lock per owner id.

    Locks are held weakly: an owner's lock lives while some caller holds a reference to it,
    so the map does not grow with every owner ever seen.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def for_owner(self, owner_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(owner_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[owner_id] = lock
            return lock


class CycleGuard:
    def __init__(
        self,
        repository: DependencyRepository,
        *,
        locks: OwnerLocks | None = None,
        verify_after_write: bool = True,
    ) -> None:
        self._repo = repository
        self._locks = locks if locks is not None else OwnerLocks()
        self._verify_after_write = verify_after_write

    def validate(self, task_id: str, depends_on_task_id: str, *, owner_id: str | None = None) -> str:
        """
        Raise the typed error for the first violated rule.

        Returns the owner id both tasks share.
        """
        if task_id == depends_on_task_id:
            raise SelfLoopError(task_id)

        task = self._repo.require_task(task_id, owner_id=owner_id)
        prereq = self._repo.require_task(depends_on_task_id, owner_id=owner_id)
        if task.owner_id != prereq.owner_id:
            raise NotFoundError(
                depends_on_task_id,
                f"Task {depends_on_task_id} does not belong to the owner of task {task_id}.",
            )

        if self._repo.edge_exists(task_id, depends_on_task_id):
            raise DuplicateError(task_id, depends_on_task_id)

        path = find_cycle_path(task_id, depends_on_task_id, self._repo.prerequisite_ids)
        if path is not None:
            raise CycleError(path)

        return task.owner_id

    def can_add_edge(self, task_id: str, depends_on_task_id: str, *, owner_id: str | None = None) -> EdgeCheck:
        try:
            self.validate(task_id, depends_on_task_id, owner_id=owner_id)
        except CycleError as e:
            return EdgeCheck(allowed=False, reason=RejectReason.CYCLE, message=e.message, cycle_path=e.path)
        except (SelfLoopError, NotFoundError, DuplicateError) as e:
            return EdgeCheck(allowed=False, reason=_REASONS[type(e)], message=e.message)
        return EdgeCheck(allowed=True)

    def add_edge(
        self,
        task_id: str,
        depends_on_task_id: str,
        *,
        owner_id: str | None = None,
        cancel: threading.Event | None = None,
    ) -> DependencyEdge:
        """
        Validate and insert the edge as one unit per owner.

        If `cancel` is set before the insert starts, nothing is written and AddCancelledError is raised.
        Once the insert has started it runs to completion.
        """
        if task_id == depends_on_task_id:
            raise SelfLoopError(task_id)

        # The lock key has to be known before validation, so resolve the owner first.
        lock_owner = owner_id or self._repo.require_task(task_id).owner_id

        with self._locks.for_owner(lock_owner):
            self.validate(task_id, depends_on_task_id, owner_id=lock_owner)

            if cancel is not None and cancel.is_set():
                raise AddCancelledError(task_id, depends_on_task_id)

            try:
                edge = self._repo.insert_edge(task_id, depends_on_task_id)
            except StoreConflictError as e:
                logger.warning("Edge %s -> %s already stored after a passing check", task_id, depends_on_task_id)
                raise ConcurrencyError(task_id, depends_on_task_id, "edge written by another writer") from e
            except StoreMissingTaskError as e:
                gone = next(
                    (i for i in (depends_on_task_id, task_id) if self._repo.get_task(i) is None),
                    depends_on_task_id,
                )
                logger.warning("Task %s deleted between check and insert of %s -> %s", gone, task_id, depends_on_task_id)
                raise NotFoundError(gone) from e

            if self._verify_after_write:
                self._verify_written(task_id, depends_on_task_id)

        logger.info("Dependency added %s -> %s owner=%s", task_id, depends_on_task_id, lock_owner)
        return edge

    def _verify_written(self, task_id: str, depends_on_task_id: str) -> None:
        """
        Re-run the reachability test with the new edge in place.

        Only a writer outside this process can make it fail; the edge is removed again in that case.
        """

        def prerequisites_without_new_edge(node: str) -> list[str]:
            ids = self._repo.prerequisite_ids(node)
            if node == task_id:
                return [i for i in ids if i != depends_on_task_id]
            return ids

        path = find_cycle_path(task_id, depends_on_task_id, prerequisites_without_new_edge)
        if path is None:
            return

        logger.warning(
            "Concurrent write closed a loop %s; rolling back %s -> %s",
            " -> ".join(path),
            task_id,
            depends_on_task_id,
        )
        self._repo.delete_edge(task_id, depends_on_task_id)
        raise ConcurrencyError(task_id, depends_on_task_id, "a concurrent edge closed a loop")
