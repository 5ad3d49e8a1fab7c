# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends / front-ends swappable and makes testing easier.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import (
        CreateTaskRequest,
        FilterSpec,
        Priority,
        Task,
        TaskStatus,
        UpdateTaskRequest,
    )
    from .theme import Theme


class TaskRepo(Protocol):
    """Durable, blocking task storage (SQLite / in-memory)."""

    def count_tasks(self) -> int: ...
    def create(self, task: Task) -> None: ...
    def get(self, task_id: str) -> Task: ...
    def list_tasks(self, spec: FilterSpec | None = None) -> list[Task]: ...
    def list_overdue(self, now: datetime) -> list[Task]: ...
    def update(self, task: Task) -> None: ...
    def delete(self, task_id: str) -> None: ...
    def close(self) -> None: ...


class TaskStoreClient(Protocol):
    """
    Async store boundary consumed by the lifecycle controller.

    Every method raises StoreError on failure (network, serialization, not found).
    """

    async def create_task(self, req: CreateTaskRequest) -> Task: ...
    async def get_task(self, task_id: str) -> Task: ...
    async def get_tasks(self, spec: FilterSpec) -> list[Task]: ...
    async def update_task(self, req: UpdateTaskRequest) -> Task: ...
    async def delete_task(self, task_id: str) -> None: ...
    async def toggle_task_status(self, task_id: str) -> Task: ...
    async def get_tasks_by_status(self, status: TaskStatus) -> list[Task]: ...
    async def get_tasks_by_priority(self, priority: Priority) -> list[Task]: ...
    async def get_tasks_by_date_range(self, date_from: datetime, date_to: datetime) -> list[Task]: ...
    async def get_overdue_tasks(self) -> list[Task]: ...


class Notifier(Protocol):
    """User-visible notifications. level is one of: success, error, info."""

    def notify(self, message: str, level: str = "info") -> None: ...


class ThemeRepo(Protocol):
    """Persisted light/dark preference."""

    def load(self) -> Theme: ...
    def save(self, theme: Theme) -> None: ...
    def toggle(self) -> Theme: ...
