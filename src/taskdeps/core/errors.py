# src/taskdeps/core/errors.py

"""
Typed failures of the dependency engine.

They are raised inside the engine and handed back to callers inside a Result,
so a caller branches on `error.kind` instead of matching message strings.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class DependencyErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    SELF_LOOP = "self_loop"
    DUPLICATE = "duplicate"
    CYCLE = "cycle"
    CONCURRENCY = "concurrency"
    CANCELLED = "cancelled"


class DependencyError(Exception):
    kind: DependencyErrorKind

    # Only ConcurrencyError is worth retrying as a whole check-and-insert.
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DependencyError):
    kind = DependencyErrorKind.NOT_FOUND

    def __init__(self, task_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Task {task_id} was not found.")
        self.task_id = task_id


class SelfLoopError(DependencyError):
    kind = DependencyErrorKind.SELF_LOOP

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} cannot depend on itself.")
        self.task_id = task_id


class DuplicateError(DependencyError):
    kind = DependencyErrorKind.DUPLICATE

    def __init__(self, task_id: str, depends_on_task_id: str) -> None:
        super().__init__("This dependency already exists.")
        self.task_id = task_id
        self.depends_on_task_id = depends_on_task_id


class CycleError(DependencyError):
    """
    The candidate edge would close a loop.

    `path` starts and ends at the dependent task, e.g. [A, B, C, A] for adding "A depends on B"
    while B already (transitively) depends on A through C.
    """

    kind = DependencyErrorKind.CYCLE

    def __init__(self, path: Sequence[str]) -> None:
        self.path = list(path)
        loop = " → ".join(self.path)
        super().__init__(
            "Circular dependency detected. "
            f"This dependency would create a loop through {loop}."
        )


class ConcurrencyError(DependencyError):
    kind = DependencyErrorKind.CONCURRENCY
    retryable = True

    def __init__(self, task_id: str, depends_on_task_id: str, detail: str = "") -> None:
        msg = f"Dependency {task_id} -> {depends_on_task_id} conflicted with a concurrent write"
        super().__init__(f"{msg}: {detail}." if detail else f"{msg}.")
        self.task_id = task_id
        self.depends_on_task_id = depends_on_task_id


class AddCancelledError(DependencyError):
    """The add was abandoned before anything was written."""

    kind = DependencyErrorKind.CANCELLED

    def __init__(self, task_id: str, depends_on_task_id: str) -> None:
        super().__init__(f"Adding dependency {task_id} -> {depends_on_task_id} was cancelled.")
        self.task_id = task_id
        self.depends_on_task_id = depends_on_task_id


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: DependencyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: DependencyError) -> Result[T]:
        return cls(error=error)
