# src/taskdeck/tasks/task_errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task subsystem errors."""


class ValidationError(TaskError):
    """Input rejected before (or by) the store, e.g. an empty title."""


class StoreError(TaskError):
    """Any failure coming out of a store operation (I/O, serialization, missing row)."""


class TaskNotFoundError(StoreError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id
