# src/taskdeck/tasks/task_view.py

"""
Filter/sort engine.

view(tasks, spec) is pure: it never mutates its input and always returns a new list.

Ordering:
- every sort key has an explicit ascending comparator
- descending negates the comparator result (never reverses the sorted list),
  so tasks with equal keys keep their input order in both directions
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime

from .task_models import FilterSpec, Priority, SortBy, SortOrder, Task, TaskStatus

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

Comparator = Callable[[Task, Task], int]

_PRIORITY_LABELS = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
}

_PRIORITY_ICONS = {
    Priority.LOW: "🟢",
    Priority.MEDIUM: "🟡",
    Priority.HIGH: "🔴",
}


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _by_title(a: Task, b: Task) -> int:
    return _cmp(a.title.casefold(), b.title.casefold())


def _by_priority(a: Task, b: Task) -> int:
    return _cmp(int(a.priority), int(b.priority))


def due_key(task: Task) -> datetime:
    """Missing due date sorts as the epoch: first ascending, last descending."""
    return task.due_date if task.due_date is not None else EPOCH


def _by_due_date(a: Task, b: Task) -> int:
    return _cmp(due_key(a), due_key(b))


def _by_created_at(a: Task, b: Task) -> int:
    return _cmp(a.created_at, b.created_at)


_COMPARATORS: dict[SortBy, Comparator] = {
    SortBy.TITLE: _by_title,
    SortBy.PRIORITY: _by_priority,
    SortBy.DUE_DATE: _by_due_date,
    SortBy.CREATED_AT: _by_created_at,
}


def comparator_for(sort_by: SortBy, sort_order: SortOrder) -> Comparator:
    base = _COMPARATORS.get(sort_by, _by_created_at)
    if sort_order == SortOrder.DESC:
        return lambda a, b: -base(a, b)
    return base


def matches(task: Task, spec: FilterSpec) -> bool:
    if spec.status is not None and task.status != spec.status:
        return False
    if spec.priority is not None and task.priority != spec.priority:
        return False
    if spec.date_from is not None and task.created_at < spec.date_from:
        return False
    if spec.date_to is not None and task.created_at > spec.date_to:
        return False
    return True


def view(tasks: Iterable[Task], spec: FilterSpec) -> list[Task]:
    kept = [t for t in tasks if matches(t, spec)]
    cmp = comparator_for(spec.sort_by, spec.sort_order)
    return sorted(kept, key=functools.cmp_to_key(cmp))


# ---- display helpers ----


def priority_label(priority: Priority) -> str:
    return _PRIORITY_LABELS.get(priority, "Unknown")


def priority_icon(priority: Priority) -> str:
    return _PRIORITY_ICONS.get(priority, "⚪")


def utcnow() -> datetime:
    return datetime.now(UTC)


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if task.due_date is None or task.status == TaskStatus.COMPLETED:
        return False
    return task.due_date < (now or utcnow())


def format_relative_date(ts: datetime, now: datetime | None = None) -> str:
    """
    Calendar-day label relative to now, in now's timezone.

    Today / Yesterday / "N days ago" within a week, Tomorrow / "in N days" for
    the coming week, otherwise the ISO date.
    """
    now = now or utcnow()
    tz = now.tzinfo or UTC
    day: date = ts.astimezone(tz).date() if ts.tzinfo else ts.date()
    delta = (now.date() - day).days

    if delta == 0:
        return "Today"
    if delta == 1:
        return "Yesterday"
    if 1 < delta < 7:
        return f"{delta} days ago"
    if delta == -1:
        return "Tomorrow"
    if -7 < delta < -1:
        return f"in {-delta} days"
    return day.isoformat()
