# src/taskdeps/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
import uuid
from pathlib import Path

from ..core.ports import StoreConflictError, StoreMissingTaskError
from .task_models import DependencyEdge, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task/edge store.

    Implements the TaskEdgeStore port plus a few host-side helpers (add/update/delete tasks).

    Integrity rules live in the schema, mirroring the hosted database:
    - UNIQUE(task_id, depends_on_task_id)
    - CHECK(task_id != depends_on_task_id)
    - ON DELETE CASCADE for edges and subtasks (foreign_keys is enabled per connection)

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._timeout = float(timeout)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        conn.execute("PRAGMA foreign_keys=ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_date TEXT,
                    parent_task_id TEXT REFERENCES tasks(id) ON DELETE CASCADE,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS task_dependencies (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
                    depends_on_task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
                    created_at REAL NOT NULL,
                    UNIQUE(task_id, depends_on_task_id),
                    CHECK (task_id != depends_on_task_id)
                )
                """
            )

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_owner ON tasks(owner_id, parent_task_id)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_deps_task ON task_dependencies(task_id)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_deps_depends_on ON task_dependencies(depends_on_task_id)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            title=str(row["title"] or ""),
            status=TaskStatus.from_db(row["status"]),
            priority=TaskPriority.from_db(row["priority"]),
            due_date=row["due_date"],
            parent_task_id=row["parent_task_id"],
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _row_to_edge(row: sqlite3.Row) -> DependencyEdge:
        return DependencyEdge(
            task_id=str(row["task_id"]),
            depends_on_task_id=str(row["depends_on_task_id"]),
            id=int(row["id"]),
            created_at=float(row["created_at"]),
        )

    # ---- host-side task helpers ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        owner_id: str,
        title: str,
        status: TaskStatus = TaskStatus.PENDING,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: str | None = None,
        parent_task_id: str | None = None,
        task_id: str | None = None,
    ) -> str:
        if not owner_id or not owner_id.strip():
            raise ValueError("owner_id is required")
        if not title or not title.strip():
            raise ValueError("title is required")

        new_id = task_id or uuid.uuid4().hex
        now = time.time()

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, owner_id, title, status, priority,
                    due_date, parent_task_id, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    new_id,
                    owner_id.strip(),
                    title.strip(),
                    status.value,
                    priority.value,
                    due_date,
                    parent_task_id,
                    now,
                    now,
                ),
            )
            conn.commit()
            logger.debug("Task added id=%s owner=%s status=%s", new_id, owner_id, status.value)
            return new_id
        finally:
            conn.close()

    def update_task_status(self, task_id: str, new_status: TaskStatus) -> None:
        now = time.time()
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE tasks SET status = ?, updated_at = ? WHERE id = ?",
                (new_status.value, now, task_id),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_task(self, task_id: str) -> None:
        """Delete a task; its subtasks and every incident dependency edge go with it."""
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
        finally:
            conn.close()

    # ---- TaskEdgeStore port ----

    def get_tasks_by_owner(self, owner_id: str, *, exclude_subtasks: bool = True) -> list[Task]:
        sql = "SELECT * FROM tasks WHERE owner_id = ?"
        if exclude_subtasks:
            sql += " AND parent_task_id IS NULL"
        sql += " ORDER BY created_at ASC, id ASC"

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(sql, (owner_id,))
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_task_by_id(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def get_edges_by_task(self, task_id: str) -> list[DependencyEdge]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM task_dependencies WHERE task_id = ? ORDER BY id ASC",
                (task_id,),
            )
            return [self._row_to_edge(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_edges_by_depends_on(self, task_id: str) -> list[DependencyEdge]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM task_dependencies WHERE depends_on_task_id = ? ORDER BY id ASC",
                (task_id,),
            )
            return [self._row_to_edge(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def insert_edge(self, task_id: str, depends_on_task_id: str) -> DependencyEdge:
        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            try:
                cur.execute(
                    """
                    INSERT INTO task_dependencies(task_id, depends_on_task_id, created_at)
                    VALUES (?, ?, ?)
                    """,
                    (task_id, depends_on_task_id, now),
                )
            except sqlite3.IntegrityError as e:
                conn.rollback()
                msg = str(e).upper()
                if "UNIQUE" in msg:
                    raise StoreConflictError(task_id, depends_on_task_id) from e
                if "FOREIGN KEY" in msg:
                    raise StoreMissingTaskError(task_id, depends_on_task_id) from e
                raise
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for task_dependencies insert")
            logger.debug("Edge inserted id=%s %s -> %s", rowid, task_id, depends_on_task_id)
            return DependencyEdge(
                task_id=task_id,
                depends_on_task_id=depends_on_task_id,
                id=int(rowid),
                created_at=now,
            )
        finally:
            conn.close()

    def delete_edge(self, task_id: str, depends_on_task_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "DELETE FROM task_dependencies WHERE task_id = ? AND depends_on_task_id = ?",
                (task_id, depends_on_task_id),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
