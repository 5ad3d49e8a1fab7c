# src/taskdeck/tasks/task_service.py

"""
Store-side task rules.

Sits on top of a TaskRepo and owns everything the repository should not decide:
- id and timestamp assignment on create
- required-field validation
- update keeps id/created_at, refreshes updated_at
- status toggling
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.ports import TaskRepo
from .task_errors import ValidationError
from .task_models import (
    CreateTaskRequest,
    FilterSpec,
    Priority,
    Task,
    TaskStatus,
    UpdateTaskRequest,
)
from .task_view import utcnow

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, repo: TaskRepo, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._repo = repo
        self._clock = clock

    def create_task(self, req: CreateTaskRequest) -> Task:
        if not req.title.strip():
            raise ValidationError("title is required")

        now = self._clock()
        task = Task(
            id=str(uuid.uuid4()),
            title=req.title,
            description=req.description,
            priority=req.priority,
            status=TaskStatus.ACTIVE,
            due_date=req.due_date,
            created_at=now,
            updated_at=now,
        )
        self._repo.create(task)
        logger.info("Task created id=%s", task.id)
        return task

    def get_task(self, task_id: str) -> Task:
        if not task_id:
            raise ValidationError("id is required")
        return self._repo.get(task_id)

    def get_tasks(self, spec: FilterSpec | None = None) -> list[Task]:
        return self._repo.list_tasks(spec)

    def update_task(self, req: UpdateTaskRequest) -> Task:
        if not req.id:
            raise ValidationError("id is required")
        if not req.title.strip():
            raise ValidationError("title is required")

        existing = self._repo.get(req.id)
        task = replace(
            existing,
            title=req.title,
            description=req.description,
            priority=req.priority,
            status=req.status,
            due_date=req.due_date,
            updated_at=self._clock(),
        )
        self._repo.update(task)
        logger.info("Task updated id=%s", task.id)
        return task

    def delete_task(self, task_id: str) -> None:
        if not task_id:
            raise ValidationError("id is required")
        self._repo.delete(task_id)
        logger.info("Task deleted id=%s", task_id)

    def toggle_task_status(self, task_id: str) -> Task:
        if not task_id:
            raise ValidationError("id is required")

        existing = self._repo.get(task_id)
        task = replace(existing, status=existing.status.toggled(), updated_at=self._clock())
        self._repo.update(task)
        logger.info("Task %s -> %s", task.id, task.status.name.lower())
        return task

    # ---- convenience queries ----

    def get_tasks_by_status(self, status: TaskStatus) -> list[Task]:
        return self.get_tasks(FilterSpec(status=status))

    def get_tasks_by_priority(self, priority: Priority) -> list[Task]:
        return self.get_tasks(FilterSpec(priority=priority))

    def get_tasks_by_date_range(self, date_from: datetime, date_to: datetime) -> list[Task]:
        return self.get_tasks(FilterSpec(date_from=date_from, date_to=date_to))

    def get_overdue_tasks(self) -> list[Task]:
        """Active tasks whose due date has passed, most overdue first."""
        return self._repo.list_overdue(self._clock())

