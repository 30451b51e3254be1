# src/taskdeps/graph/readiness.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..tasks.task_models import Task, TaskStatus
from .repository import DependencyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StartCheck:
    can_start: bool
    blocked_by: list[Task] = field(default_factory=list)
    message: str = ""


class ReadinessEvaluator:
    """
    A pending task is ready when every prerequisite is completed.

    Only pending tasks are candidates; in_progress/blocked/completed/cancelled never are.

    An edge to a prerequisite that no longer exists keeps the task out of `ready_tasks`
    (a missing task is not completed), while `can_start` only reports existing blockers.
    """

    def __init__(self, repository: DependencyRepository) -> None:
        self._repo = repository

    def _prerequisites(self, task_id: str, cache: dict[str, Task | None]) -> tuple[list[Task], list[str]]:
        """Return (incomplete prerequisites, ids of prerequisites the store no longer has)."""
        blocking: list[Task] = []
        missing: list[str] = []
        for prereq_id in self._repo.prerequisite_ids(task_id):
            if prereq_id not in cache:
                cache[prereq_id] = self._repo.get_task(prereq_id)
            prereq = cache[prereq_id]
            if prereq is None:
                missing.append(prereq_id)
            elif prereq.status != TaskStatus.COMPLETED:
                blocking.append(prereq)
        return blocking, missing

    def ready_tasks(self, owner_id: str) -> list[Task]:
        cache: dict[str, Task | None] = {}
        ready: list[Task] = []
        for task in self._repo.tasks_for_owner(owner_id, exclude_subtasks=False):
            if task.status != TaskStatus.PENDING:
                continue
            blocking, missing = self._prerequisites(task.id, cache)
            if missing:
                logger.warning("Task %s depends on missing task(s) %s; not ready", task.id, ", ".join(missing))
                continue
            if not blocking:
                ready.append(task)
        return ready

    def can_start(self, task_id: str) -> StartCheck:
        """Raises NotFoundError for an unknown task."""
        self._repo.require_task(task_id)

        if not self._repo.prerequisite_ids(task_id):
            return StartCheck(can_start=True, message="Task has no dependencies and can be started.")

        blocked_by, missing = self._prerequisites(task_id, {})
        if missing:
            logger.warning("Task %s depends on missing task(s) %s; ignoring the edge", task_id, ", ".join(missing))
        if not blocked_by:
            return StartCheck(can_start=True, message="All dependencies are completed. Task can be started.")

        return StartCheck(
            can_start=False,
            blocked_by=blocked_by,
            message=f"Task is blocked by {len(blocked_by)} incomplete dependencies.",
        )
