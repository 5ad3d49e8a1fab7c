# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, StrEnum


class Priority(IntEnum):
    """Task priority. Integer values are the wire encoding and the sort order."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2


class TaskStatus(IntEnum):
    ACTIVE = 0
    COMPLETED = 1

    def toggled(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self is TaskStatus.ACTIVE else TaskStatus.ACTIVE


class SortBy(StrEnum):
    CREATED_AT = "created_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"

    @classmethod
    def from_wire(cls, raw: str | None) -> SortBy:
        if not raw:
            return cls.CREATED_AT
        try:
            return cls(raw)
        except ValueError:
            return cls.CREATED_AT


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_wire(cls, raw: str | None) -> SortOrder:
        # Anything other than "desc" sorts ascending, same as the SQL backend.
        return cls.DESC if raw == cls.DESC.value else cls.ASC


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    priority: Priority
    status: TaskStatus
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """
    Which tasks to show and how to order them.

    Rebuilt from the current controls on every filter change, never persisted.
    date_from / date_to bound created_at (inclusive).
    """

    status: TaskStatus | None = None
    priority: Priority | None = None
    sort_by: SortBy = SortBy.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    date_from: datetime | None = None
    date_to: datetime | None = None


DEFAULT_FILTER = FilterSpec()

OVERDUE_FILTER = FilterSpec(
    status=TaskStatus.ACTIVE,
    sort_by=SortBy.DUE_DATE,
    sort_order=SortOrder.ASC,
)


@dataclass(frozen=True, slots=True)
class CreateTaskRequest:
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class UpdateTaskRequest:
    id: str
    title: str
    description: str
    priority: Priority
    status: TaskStatus
    due_date: datetime | None = None


@dataclass(slots=True)
class TaskForm:
    """Editable input fields shared by create and edit mode."""

    title: str = ""
    description: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        return cls(
            title=task.title,
            description=task.description or "",
            priority=task.priority,
            due_date=task.due_date,
        )


@dataclass(frozen=True, slots=True)
class TaskCommand:
    """UI event: an action applied to a task identified by id."""

    action: str
    task_id: str
