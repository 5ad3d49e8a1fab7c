# src/taskdeck/tasks/task_controller.py

"""
Task lifecycle controller.

Owns the local task cache, the edit session and the pending-deletion gate, and
keeps the cache in step with the store:

- CreateMode (initial): submit -> create_task
- EditMode (after begin_edit): submit -> update_task; left on success or cancel_edit,
  kept on failure so the user can retry

Every store call is awaited first and merged afterwards. The merge itself never
awaits, so on a single event loop a render sees either the old cache or the fully
merged one. A failed call leaves the cache untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import StrEnum

from ..core.ports import Notifier, TaskStoreClient
from .task_errors import StoreError, TaskError, ValidationError
from .task_models import (
    DEFAULT_FILTER,
    OVERDUE_FILTER,
    CreateTaskRequest,
    FilterSpec,
    Priority,
    Task,
    TaskCommand,
    TaskForm,
    TaskStatus,
    UpdateTaskRequest,
)
from .task_view import view

logger = logging.getLogger(__name__)


class EditorMode(StrEnum):
    CREATE = "create"
    EDIT = "edit"


class LoggingNotifier:
    """Default notifier: user-facing messages go to the log."""

    def notify(self, message: str, level: str = "info") -> None:
        if level == "error":
            logger.error("%s", message)
        else:
            logger.info("[%s] %s", level, message)


class TaskLifecycleController:
    def __init__(
        self,
        store: TaskStoreClient,
        *,
        notifier: Notifier | None = None,
        filter_spec: FilterSpec = DEFAULT_FILTER,
    ) -> None:
        self._store = store
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._default_filter = filter_spec
        self.filter_spec = filter_spec
        self.form = TaskForm()
        self.last_error: TaskError | None = None

        self._tasks: list[Task] = []
        self._editing: Task | None = None
        self._pending_delete_id: str | None = None

    # ---- state ----

    @property
    def tasks(self) -> list[Task]:
        """Cache in insertion order (copy of the list, tasks are shared)."""
        return list(self._tasks)

    @property
    def mode(self) -> EditorMode:
        return EditorMode.EDIT if self._editing is not None else EditorMode.CREATE

    @property
    def editing(self) -> Task | None:
        return self._editing

    @property
    def pending_delete_id(self) -> str | None:
        return self._pending_delete_id

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def visible_tasks(self) -> list[Task]:
        return view(self._tasks, self.filter_spec)

    def set_filter(self, spec: FilterSpec) -> list[Task]:
        self.filter_spec = spec
        return self.visible_tasks()

    def clear_filters(self) -> list[Task]:
        return self.set_filter(self._default_filter)

    # ---- cache merges (never await in here) ----

    def _replace_cached(self, task: Task) -> None:
        for i, t in enumerate(self._tasks):
            if t.id == task.id:
                self._tasks[i] = task
                break
        if self._editing is not None and self._editing.id == task.id:
            self._editing = task

    def _prepend_cached(self, task: Task) -> None:
        self._tasks = [task] + [t for t in self._tasks if t.id != task.id]

    def _remove_cached(self, task_id: str) -> None:
        self._tasks = [t for t in self._tasks if t.id != task_id]
        if self._editing is not None and self._editing.id == task_id:
            self._exit_edit()

    def _exit_edit(self) -> None:
        self._editing = None
        self.form = TaskForm()

    def _store_failed(self, message: str, exc: StoreError) -> None:
        logger.warning("%s: %s", message, exc)
        self.last_error = exc
        self._notifier.notify(message, "error")

    def _reject(self, message: str) -> ValidationError:
        err = ValidationError(message)
        self.last_error = err
        self._notifier.notify(message, "error")
        return err

    # ---- create / edit ----

    async def create_task(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task | None:
        """
        Create a task in the store and put it at the front of the cache.

        Raises ValidationError (after notifying) if the title is blank.
        Returns None if the store call failed.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise self._reject("Please enter a task title")

        req = CreateTaskRequest(
            title=clean_title,
            description=(description or "").strip(),
            priority=priority,
            due_date=due_date,
        )
        try:
            task = await self._store.create_task(req)
        except StoreError as exc:
            self._store_failed("Error saving task", exc)
            return None

        self._prepend_cached(task)
        # A create issued while editing must not wipe the edit form.
        if self.mode == EditorMode.CREATE:
            self.form = TaskForm()
        self.last_error = None
        self._notifier.notify("Task created successfully", "success")
        return task

    def begin_edit(self, task: Task | str) -> TaskForm | None:
        """Enter EditMode for a cached task (or its id) and fill the form from it."""
        task_id = task if isinstance(task, str) else task.id
        cached = self.get_task(task_id)
        if cached is None:
            self._notifier.notify("Task not found", "error")
            return None

        self._editing = cached
        self.form = TaskForm.from_task(cached)
        logger.debug("Editing task id=%s", task_id)
        return self.form

    def cancel_edit(self) -> None:
        if self._editing is not None:
            logger.debug("Edit cancelled id=%s", self._editing.id)
        self._exit_edit()

    async def update_task(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task | None:
        """
        Send the edited fields for the task in the current edit session.

        Status is carried over from the task being edited. On failure the
        session stays open.
        """
        session = self._editing
        if session is None:
            raise self._reject("No task is being edited")

        clean_title = (title or "").strip()
        if not clean_title:
            raise self._reject("Please enter a task title")

        req = UpdateTaskRequest(
            id=session.id,
            title=clean_title,
            description=(description or "").strip(),
            priority=priority,
            status=session.status,
            due_date=due_date,
        )
        try:
            updated = await self._store.update_task(req)
        except StoreError as exc:
            self._store_failed("Error saving task", exc)
            return None

        self._replace_cached(updated)
        # The user may have switched to another task while this was in flight.
        if self._editing is not None and self._editing.id == session.id:
            self._exit_edit()
        self.last_error = None
        self._notifier.notify("Task updated successfully", "success")
        return updated

    async def submit(self, form: TaskForm | None = None) -> Task | None:
        """Create or update depending on the current mode."""
        form = form or self.form
        if self.mode == EditorMode.EDIT:
            return await self.update_task(form.title, form.description, form.priority, form.due_date)
        return await self.create_task(form.title, form.description, form.priority, form.due_date)

    # ---- status / delete ----

    async def toggle_status(self, task_id: str) -> Task | None:
        try:
            updated = await self._store.toggle_task_status(task_id)
        except StoreError as exc:
            self._store_failed("Error updating task status", exc)
            return None

        self._replace_cached(updated)
        self.last_error = None
        self._notifier.notify("Task status updated", "success")
        return updated

    def request_delete(self, task_id: str) -> None:
        """First step of deletion: remember which task to delete."""
        self._pending_delete_id = task_id

    def cancel_delete(self) -> None:
        self._pending_delete_id = None

    async def confirm_delete(self) -> bool:
        """
        Second step: delete the pending task.

        The pending id is cleared whatever the outcome. Returns True if the
        task was deleted.
        """
        task_id = self._pending_delete_id
        if task_id is None:
            return False
        try:
            return await self._delete(task_id)
        finally:
            self._pending_delete_id = None

    async def delete_task(self, task_id: str) -> bool:
        """Request and immediately confirm deletion of task_id."""
        self.request_delete(task_id)
        return await self.confirm_delete()

    async def _delete(self, task_id: str) -> bool:
        try:
            await self._store.delete_task(task_id)
        except StoreError as exc:
            self._store_failed("Error deleting task", exc)
            return False

        self._remove_cached(task_id)
        self.last_error = None
        self._notifier.notify("Task deleted successfully", "success")
        return True

    # ---- loading ----

    async def _load(self, what: str, fetch, spec: FilterSpec) -> list[Task] | None:
        try:
            fetched = await fetch
        except StoreError as exc:
            self._store_failed(f"Error loading {what}", exc)
            return None

        # The store may or may not honour the filter; re-apply it locally.
        self._tasks = view(fetched, spec)
        self.filter_spec = spec
        self.last_error = None
        logger.debug("Loaded %d %s", len(self._tasks), what)
        return self.tasks

    async def load_all(self, spec: FilterSpec | None = None) -> list[Task] | None:
        """Replace the whole cache with the store's answer for spec."""
        spec = spec or self.filter_spec
        return await self._load("tasks", self._store.get_tasks(spec), spec)

    async def load_by_status(self, status: TaskStatus) -> list[Task] | None:
        spec = FilterSpec(status=status)
        return await self._load("tasks", self._store.get_tasks_by_status(status), spec)

    async def load_by_priority(self, priority: Priority) -> list[Task] | None:
        spec = FilterSpec(priority=priority)
        return await self._load("tasks", self._store.get_tasks_by_priority(priority), spec)

    async def load_by_date_range(self, date_from: datetime, date_to: datetime) -> list[Task] | None:
        spec = FilterSpec(date_from=date_from, date_to=date_to)
        return await self._load("tasks", self._store.get_tasks_by_date_range(date_from, date_to), spec)

    async def load_overdue(self) -> list[Task] | None:
        return await self._load("overdue tasks", self._store.get_overdue_tasks(), OVERDUE_FILTER)

    async def refresh_task(self, task_id: str) -> Task | None:
        """Re-read one task from the store and merge it into the cache."""
        try:
            fresh = await self._store.get_task(task_id)
        except StoreError as exc:
            self._store_failed("Error loading task", exc)
            return None

        if self.get_task(task_id) is None:
            self._prepend_cached(fresh)
        else:
            self._replace_cached(fresh)
        self.last_error = None
        return fresh

    # ---- UI commands ----

    async def dispatch(self, command: TaskCommand) -> object:
        """
        Apply a UI event. The task is looked up in our own cache by id; the
        event never carries task data.
        """
        action = command.action
        if action == "confirm_delete":
            return await self.confirm_delete()
        if action == "cancel_delete":
            self.cancel_delete()
            return None
        if action == "cancel_edit":
            self.cancel_edit()
            return None

        task = self.get_task(command.task_id)
        if task is None:
            self._notifier.notify("Task not found", "error")
            return None

        if action == "edit":
            return self.begin_edit(task)
        if action == "toggle":
            return await self.toggle_status(task.id)
        if action == "delete":
            self.request_delete(task.id)
            return None

        raise ValueError(f"unknown task action: {action}")
