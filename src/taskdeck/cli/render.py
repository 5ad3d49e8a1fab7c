# src/taskdeck/cli/render.py

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from ..core.theme import Theme
from ..tasks.task_models import FilterSpec, Task, TaskForm, TaskStatus
from ..tasks.task_view import format_relative_date, is_overdue, priority_icon, priority_label, utcnow

EMPTY_STATE = "No tasks found\nCreate your first task to get started!"

_THEME_ICONS = {Theme.LIGHT: "🌙", Theme.DARK: "☀️"}

_ANSI_DIM = "\033[2m"
_ANSI_RESET = "\033[0m"


def render_task(index: int, task: Task, *, now: datetime | None = None, theme: Theme = Theme.LIGHT) -> str:
    now = now or utcnow()
    done = task.status == TaskStatus.COMPLETED
    box = "[x]" if done else "[ ]"

    meta = [f"{priority_icon(task.priority)} {priority_label(task.priority)}"]
    if task.due_date is not None:
        due = f"📅 {format_relative_date(task.due_date, now)}"
        if is_overdue(task, now):
            due += " (overdue)"
        meta.append(due)
    meta.append(f"Created: {format_relative_date(task.created_at, now)}")

    line = f"{index:>3}. {box} {task.title}"
    if task.description:
        line += f"\n       {task.description}"
    line += f"\n       {' | '.join(meta)}  #{task.id[:8]}"

    # Dark terminals: dim completed tasks instead of relying on strike-through.
    if done and theme == Theme.DARK:
        line = f"{_ANSI_DIM}{line}{_ANSI_RESET}"
    return line


def render_tasks(tasks: Sequence[Task], *, now: datetime | None = None, theme: Theme = Theme.LIGHT) -> str:
    if not tasks:
        return EMPTY_STATE
    now = now or utcnow()
    return "\n".join(render_task(i, t, now=now, theme=theme) for i, t in enumerate(tasks, start=1))


def describe_filter(spec: FilterSpec) -> str:
    status = "all" if spec.status is None else spec.status.name.lower()
    priority = "all" if spec.priority is None else spec.priority.name.lower()
    return f"status={status} priority={priority} sort={spec.sort_by.value} {spec.sort_order.value}"


def render_form(form: TaskForm, *, editing: bool) -> str:
    heading = "Update Task" if editing else "Add New Task"
    due = form.due_date.astimezone().strftime("%Y-%m-%d %H:%M") if form.due_date else "-"
    return (
        f"{heading}:\n"
        f"  title: {form.title}\n"
        f"  description: {form.description or '-'}\n"
        f"  priority: {priority_label(form.priority)}\n"
        f"  due: {due}"
    )


def theme_icon(theme: Theme) -> str:
    return _THEME_ICONS[theme]
