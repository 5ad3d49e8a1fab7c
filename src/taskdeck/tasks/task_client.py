# src/taskdeck/tasks/task_client.py

from __future__ import annotations

import logging
from collections.abc import Awaitable
from datetime import datetime
from typing import TypeVar

from . import task_codec as codec
from .task_api import TaskApi
from .task_errors import StoreError
from .task_models import (
    CreateTaskRequest,
    FilterSpec,
    Priority,
    Task,
    TaskStatus,
    UpdateTaskRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiTaskStoreClient:
    """
    TaskStoreClient over TaskApi's JSON endpoints.

    Requests are encoded, responses decoded, and whatever goes wrong underneath
    (validation, serialization, I/O, missing rows) surfaces as StoreError.
    StoreError subclasses such as TaskNotFoundError pass through unchanged.
    """

    def __init__(self, api: TaskApi) -> None:
        self._api = api

    @staticmethod
    async def _call(op: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except StoreError:
            raise
        except Exception as exc:
            logger.debug("Store call %s failed: %s", op, exc)
            raise StoreError(f"{op} failed: {exc}") from exc

    @staticmethod
    def _decode(op: str, payload: str, decoder):
        try:
            return decoder(payload)
        except Exception as exc:
            raise StoreError(f"{op}: bad response: {exc}") from exc

    async def create_task(self, req: CreateTaskRequest) -> Task:
        raw = await self._call("CreateTask", self._api.create_task(codec.dump_create_request(req)))
        return self._decode("CreateTask", raw, codec.load_task)

    async def get_task(self, task_id: str) -> Task:
        raw = await self._call("GetTask", self._api.get_task(task_id))
        return self._decode("GetTask", raw, codec.load_task)

    async def get_tasks(self, spec: FilterSpec) -> list[Task]:
        raw = await self._call("GetTasks", self._api.get_tasks(codec.dump_filter(spec)))
        return self._decode("GetTasks", raw, codec.load_tasks)

    async def update_task(self, req: UpdateTaskRequest) -> Task:
        raw = await self._call("UpdateTask", self._api.update_task(codec.dump_update_request(req)))
        return self._decode("UpdateTask", raw, codec.load_task)

    async def delete_task(self, task_id: str) -> None:
        await self._call("DeleteTask", self._api.delete_task(task_id))

    async def toggle_task_status(self, task_id: str) -> Task:
        raw = await self._call("ToggleTaskStatus", self._api.toggle_task_status(task_id))
        return self._decode("ToggleTaskStatus", raw, codec.load_task)

    async def get_tasks_by_status(self, status: TaskStatus) -> list[Task]:
        raw = await self._call("GetTasksByStatus", self._api.get_tasks_by_status(int(status)))
        return self._decode("GetTasksByStatus", raw, codec.load_tasks)

    async def get_tasks_by_priority(self, priority: Priority) -> list[Task]:
        raw = await self._call("GetTasksByPriority", self._api.get_tasks_by_priority(int(priority)))
        return self._decode("GetTasksByPriority", raw, codec.load_tasks)

    async def get_tasks_by_date_range(self, date_from: datetime, date_to: datetime) -> list[Task]:
        raw = await self._call(
            "GetTasksByDateRange",
            self._api.get_tasks_by_date_range(codec.ts_to_wire(date_from), codec.ts_to_wire(date_to)),
        )
        return self._decode("GetTasksByDateRange", raw, codec.load_tasks)

    async def get_overdue_tasks(self) -> list[Task]:
        raw = await self._call("GetOverdueTasks", self._api.get_overdue_tasks())
        return self._decode("GetOverdueTasks", raw, codec.load_tasks)
