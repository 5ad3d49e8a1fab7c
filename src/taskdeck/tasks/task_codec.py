# src/taskdeck/tasks/task_codec.py

"""
JSON wire format for the store boundary.

Every request/response that crosses TaskApi is a JSON string:
- Task: {"id", "title", "description", "priority", "status", "dueDate", "createdAt", "updatedAt"}
- priority/status are integers (Priority / TaskStatus values)
- timestamps are written as ISO-8601 in UTC; naive values on either side are local time
- dueDate is null (or missing) when unset
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from .task_errors import ValidationError
from .task_models import (
    CreateTaskRequest,
    FilterSpec,
    Priority,
    SortBy,
    SortOrder,
    Task,
    TaskStatus,
    UpdateTaskRequest,
)


def ts_to_wire(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    # Naive values are local time (same rule as user input); the wire is always UTC.
    return ts.astimezone(UTC).isoformat()


def ts_from_wire(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ValidationError(f"invalid timestamp: {raw!r}")
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"invalid timestamp: {raw!r}") from exc
    if ts.tzinfo is None:
        ts = ts.astimezone(UTC)
    return ts


def _loads_object(payload: str) -> dict[str, Any]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise ValidationError("invalid request format") from exc
    if not isinstance(data, dict):
        raise ValidationError("invalid request format")
    return data


def _enum_field(enum_cls, raw: Any, *, default=None):
    if raw is None:
        return default
    try:
        return enum_cls(int(raw))
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"invalid {enum_cls.__name__}: {raw!r}") from exc


# ---- Task ----


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": int(task.priority),
        "status": int(task.status),
        "dueDate": ts_to_wire(task.due_date),
        "createdAt": ts_to_wire(task.created_at),
        "updatedAt": ts_to_wire(task.updated_at),
    }


def task_from_dict(data: dict[str, Any]) -> Task:
    task_id = data.get("id")
    if not task_id:
        raise ValidationError("task payload without id")
    created_at = ts_from_wire(data.get("createdAt"))
    if created_at is None:
        raise ValidationError("task payload without createdAt")
    return Task(
        id=str(task_id),
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        priority=_enum_field(Priority, data.get("priority"), default=Priority.MEDIUM),
        status=_enum_field(TaskStatus, data.get("status"), default=TaskStatus.ACTIVE),
        due_date=ts_from_wire(data.get("dueDate")),
        created_at=created_at,
        updated_at=ts_from_wire(data.get("updatedAt")) or created_at,
    )


def dump_task(task: Task) -> str:
    return json.dumps(task_to_dict(task), ensure_ascii=False)


def load_task(payload: str) -> Task:
    return task_from_dict(_loads_object(payload))


def dump_tasks(tasks: list[Task]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False)


def load_tasks(payload: str) -> list[Task]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise ValidationError("invalid response format") from exc
    # A nil slice marshals to null on some backends.
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValidationError("invalid response format")
    if not all(isinstance(item, dict) for item in data):
        raise ValidationError("invalid response format")
    return [task_from_dict(item) for item in data]


# ---- Requests ----


def dump_create_request(req: CreateTaskRequest) -> str:
    return json.dumps(
        {
            "title": req.title,
            "description": req.description,
            "priority": int(req.priority),
            "dueDate": ts_to_wire(req.due_date),
        },
        ensure_ascii=False,
    )


def load_create_request(payload: str) -> CreateTaskRequest:
    data = _loads_object(payload)
    return CreateTaskRequest(
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        priority=_enum_field(Priority, data.get("priority"), default=Priority.LOW),
        due_date=ts_from_wire(data.get("dueDate")),
    )


def dump_update_request(req: UpdateTaskRequest) -> str:
    return json.dumps(
        {
            "id": req.id,
            "title": req.title,
            "description": req.description,
            "priority": int(req.priority),
            "status": int(req.status),
            "dueDate": ts_to_wire(req.due_date),
        },
        ensure_ascii=False,
    )


def load_update_request(payload: str) -> UpdateTaskRequest:
    data = _loads_object(payload)
    return UpdateTaskRequest(
        id=str(data.get("id") or ""),
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        priority=_enum_field(Priority, data.get("priority"), default=Priority.LOW),
        status=_enum_field(TaskStatus, data.get("status"), default=TaskStatus.ACTIVE),
        due_date=ts_from_wire(data.get("dueDate")),
    )


# ---- FilterSpec ----


def dump_filter(spec: FilterSpec) -> str:
    return json.dumps(
        {
            "status": None if spec.status is None else int(spec.status),
            "priority": None if spec.priority is None else int(spec.priority),
            "dateFrom": ts_to_wire(spec.date_from),
            "dateTo": ts_to_wire(spec.date_to),
            "sortBy": spec.sort_by.value,
            "sortOrder": spec.sort_order.value,
        }
    )


def load_filter(payload: str) -> FilterSpec | None:
    """Empty payload means "no filter" (store default ordering)."""
    if not payload or not payload.strip():
        return None
    data = _loads_object(payload)
    return FilterSpec(
        status=_enum_field(TaskStatus, data.get("status")),
        priority=_enum_field(Priority, data.get("priority")),
        sort_by=SortBy.from_wire(data.get("sortBy")),
        sort_order=SortOrder.from_wire(data.get("sortOrder")),
        date_from=ts_from_wire(data.get("dateFrom")),
        date_to=ts_from_wire(data.get("dateTo")),
    )
