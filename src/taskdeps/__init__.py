# src/taskdeps/__init__.py

"""Task dependency graph engine: acyclic "depends on" edges between tasks, layering, readiness and paths."""

from .core.errors import (
    AddCancelledError,
    ConcurrencyError,
    CycleError,
    DependencyError,
    DependencyErrorKind,
    DuplicateError,
    NotFoundError,
    Result,
    SelfLoopError,
)
from .core.ports import StoreConflictError, StoreMissingTaskError, TaskEdgeStore
from .graph.async_engine import AsyncDependencyEngine
from .graph.engine import BulkAddResult, DependencyEngine
from .tasks.task_models import DependencyEdge, Task, TaskPriority, TaskStatus
from .tasks.task_store import TaskStore

__version__ = "0.1.0"

__all__ = [
    "AddCancelledError",
    "AsyncDependencyEngine",
    "BulkAddResult",
    "ConcurrencyError",
    "CycleError",
    "DependencyEdge",
    "DependencyEngine",
    "DependencyError",
    "DependencyErrorKind",
    "DuplicateError",
    "NotFoundError",
    "Result",
    "SelfLoopError",
    "StoreConflictError",
    "StoreMissingTaskError",
    "Task",
    "TaskEdgeStore",
    "TaskPriority",
    "TaskStatus",
    "TaskStore",
]
