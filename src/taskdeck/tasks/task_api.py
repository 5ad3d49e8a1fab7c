# src/taskdeck/tasks/task_api.py

"""
Async JSON endpoints of the task store.

This is the boundary the front-end talks to: every argument and result is a JSON
string (see task_codec). Repository work is blocking (SQLite), so each call runs
in a worker thread and the event loop stays free for rendering.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from . import task_codec as codec
from .task_errors import ValidationError
from .task_models import Priority, TaskStatus
from .task_service import TaskService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskApi:
    def __init__(self, service: TaskService) -> None:
        self._service = service

    @staticmethod
    async def _run(fn: Callable[..., T], *args) -> T:
        return await asyncio.to_thread(fn, *args)

    async def create_task(self, request_json: str) -> str:
        req = codec.load_create_request(request_json)
        task = await self._run(self._service.create_task, req)
        return codec.dump_task(task)

    async def get_task(self, task_id: str) -> str:
        task = await self._run(self._service.get_task, task_id)
        return codec.dump_task(task)

    async def get_tasks(self, filter_json: str = "") -> str:
        spec = codec.load_filter(filter_json)
        tasks = await self._run(self._service.get_tasks, spec)
        return codec.dump_tasks(tasks)

    async def update_task(self, request_json: str) -> str:
        req = codec.load_update_request(request_json)
        task = await self._run(self._service.update_task, req)
        return codec.dump_task(task)

    async def delete_task(self, task_id: str) -> None:
        await self._run(self._service.delete_task, task_id)

    async def toggle_task_status(self, task_id: str) -> str:
        task = await self._run(self._service.toggle_task_status, task_id)
        return codec.dump_task(task)

    async def get_tasks_by_status(self, status: int) -> str:
        tasks = await self._run(self._service.get_tasks_by_status, TaskStatus(status))
        return codec.dump_tasks(tasks)

    async def get_tasks_by_priority(self, priority: int) -> str:
        tasks = await self._run(self._service.get_tasks_by_priority, Priority(priority))
        return codec.dump_tasks(tasks)

    async def get_tasks_by_date_range(self, date_from: str, date_to: str) -> str:
        """Bounds are ISO-8601 timestamps, inclusive, on createdAt."""
        start = codec.ts_from_wire(date_from)
        end = codec.ts_from_wire(date_to)
        if start is None or end is None:
            raise ValidationError("dateFrom and dateTo are required")
        tasks = await self._run(self._service.get_tasks_by_date_range, start, end)
        return codec.dump_tasks(tasks)

    async def get_overdue_tasks(self) -> str:
        tasks = await self._run(self._service.get_overdue_tasks)
        return codec.dump_tasks(tasks)
