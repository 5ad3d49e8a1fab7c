# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterator
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .task_errors import StoreError, TaskNotFoundError
from .task_models import FilterSpec, Priority, SortBy, SortOrder, Task, TaskStatus
from .task_view import view

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = {
    SortBy.CREATED_AT: "created_at",
    # NULL due dates order as the epoch, same as the client-side engine.
    SortBy.DUE_DATE: "COALESCE(due_date, 0)",
    SortBy.PRIORITY: "priority",
    SortBy.TITLE: "title COLLATE NOCASE",
}


def _to_epoch(ts: datetime | None) -> float | None:
    return None if ts is None else ts.timestamp()


def _from_epoch(raw: Any) -> datetime | None:
    return None if raw is None else datetime.fromtimestamp(float(raw), tz=UTC)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Timestamps are stored as UTC epoch seconds (REAL).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextlib.contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open task database {self._db_path}: {exc}") from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            raise StoreError(f"task database error: {exc}") from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._session() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    priority INTEGER NOT NULL DEFAULT 1,
                    status INTEGER NOT NULL DEFAULT 0,
                    due_date REAL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("priority", "INTEGER NOT NULL DEFAULT 1")
            add_col("status", "INTEGER NOT NULL DEFAULT 0")
            add_col("due_date", "REAL")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")
            conn.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        created_at = datetime.fromtimestamp(float(row["created_at"] or 0), tz=UTC)
        # Rows migrated from the old schema have updated_at = 0.
        updated_raw = row["updated_at"]
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            priority=Priority(int(row["priority"])),
            status=TaskStatus(int(row["status"])),
            due_date=_from_epoch(row["due_date"]),
            created_at=created_at,
            updated_at=_from_epoch(updated_raw) if updated_raw else created_at,
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._session() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def create(self, task: Task) -> None:
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO tasks(id, title, description, priority, status,
                                  due_date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.title,
                    task.description,
                    int(task.priority),
                    int(task.status),
                    _to_epoch(task.due_date),
                    _to_epoch(task.created_at),
                    _to_epoch(task.updated_at),
                ),
            )
            conn.commit()
        logger.debug("Task added id=%s priority=%s due=%s", task.id, task.priority.name, task.due_date)

    def get(self, task_id: str) -> Task:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return self._row_to_task(row)

    def list_tasks(self, spec: FilterSpec | None = None) -> list[Task]:
        """
        Tasks matching spec, in spec order.

        No spec -> every task, newest first.
        """
        sql = "SELECT * FROM tasks"
        where: list[str] = []
        params: list[Any] = []

        if spec is not None:
            if spec.status is not None:
                where.append("status = ?")
                params.append(int(spec.status))
            if spec.priority is not None:
                where.append("priority = ?")
                params.append(int(spec.priority))
            if spec.date_from is not None:
                where.append("created_at >= ?")
                params.append(_to_epoch(spec.date_from))
            if spec.date_to is not None:
                where.append("created_at <= ?")
                params.append(_to_epoch(spec.date_to))

        if where:
            sql += " WHERE " + " AND ".join(where)

        if spec is not None:
            direction = "DESC" if spec.sort_order == SortOrder.DESC else "ASC"
            sql += f" ORDER BY {_ORDER_COLUMNS[spec.sort_by]} {direction}"
        else:
            sql += " ORDER BY created_at DESC"

        with self._session() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_task(r) for r in rows]

    def list_overdue(self, now: datetime) -> list[Task]:
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT *
                FROM tasks
                WHERE status = ?
                  AND due_date IS NOT NULL
                  AND due_date < ?
                ORDER BY due_date ASC
                """,
                (int(TaskStatus.ACTIVE), now.timestamp()),
            ).fetchall()
        return [self._row_to_task(r) for r in rows]

    def update(self, task: Task) -> None:
        with self._session() as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, priority = ?, status = ?,
                    due_date = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    task.title,
                    task.description,
                    int(task.priority),
                    int(task.status),
                    _to_epoch(task.due_date),
                    _to_epoch(task.updated_at),
                    task.id,
                ),
            )
            conn.commit()
            if cur.rowcount == 0:
                raise TaskNotFoundError(task.id)

    def delete(self, task_id: str) -> None:
        with self._session() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            if cur.rowcount == 0:
                raise TaskNotFoundError(task_id)
        logger.debug("Task deleted id=%s", task_id)


class MemoryTaskStore:
    """
    In-process task store.

    Used when SQLite is unavailable (or explicitly configured) and in tests.
    Always hands out copies so callers never share rows with the store.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.RLock()
        logger.info("MemoryTaskStore ready (tasks are not persisted)")

    def close(self) -> None:
        return

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create(self, task: Task) -> None:
        with self._lock:
            self._tasks[task.id] = replace(task)

    def get(self, task_id: str) -> Task:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            return replace(task)

    def list_tasks(self, spec: FilterSpec | None = None) -> list[Task]:
        with self._lock:
            snapshot = [replace(t) for t in self._tasks.values()]
        return view(snapshot, spec or FilterSpec())

    def list_overdue(self, now: datetime) -> list[Task]:
        with self._lock:
            snapshot = [replace(t) for t in self._tasks.values()]
        due = [
            t
            for t in snapshot
            if t.status == TaskStatus.ACTIVE and t.due_date is not None and t.due_date < now
        ]
        return view(due, FilterSpec(sort_by=SortBy.DUE_DATE, sort_order=SortOrder.ASC))

    def update(self, task: Task) -> None:
        with self._lock:
            if task.id not in self._tasks:
                raise TaskNotFoundError(task.id)
            self._tasks[task.id] = replace(task)

    def delete(self, task_id: str) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise TaskNotFoundError(task_id)
