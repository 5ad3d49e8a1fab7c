# src/taskdeck/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import cast

from ..core.state import AppState
from ..core.theme import Theme
from ..tasks.task_errors import ValidationError
from ..tasks.task_models import (
    FilterSpec,
    Priority,
    SortBy,
    SortOrder,
    TaskCommand,
    TaskForm,
    TaskStatus,
)
from .render import describe_filter, render_form, render_task, render_tasks, theme_icon

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing ----

_PRIORITY_WORDS = {
    "low": Priority.LOW,
    "l": Priority.LOW,
    "medium": Priority.MEDIUM,
    "med": Priority.MEDIUM,
    "m": Priority.MEDIUM,
    "high": Priority.HIGH,
    "h": Priority.HIGH,
}

_STATUS_WORDS = {
    "active": TaskStatus.ACTIVE,
    "open": TaskStatus.ACTIVE,
    "completed": TaskStatus.COMPLETED,
    "done": TaskStatus.COMPLETED,
}

_SORT_WORDS = {
    "created": SortBy.CREATED_AT,
    "created_at": SortBy.CREATED_AT,
    "due": SortBy.DUE_DATE,
    "due_date": SortBy.DUE_DATE,
    "priority": SortBy.PRIORITY,
    "title": SortBy.TITLE,
}

_CLEAR = object()


@dataclass(slots=True)
class ParsedFields:
    """
    Task fields parsed from "/add" or "/save" arguments.

    None means "not given"; due_date may also be _CLEAR ("@-").
    """

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    due_date: object = None


def parse_due(raw: str) -> datetime:
    """YYYY-MM-DD or YYYY-MM-DDTHH:MM; naive values are local time."""
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid due date: {raw!r} (use YYYY-MM-DD or YYYY-MM-DDTHH:MM)") from exc
    return ts.astimezone() if ts.tzinfo is None else ts


def parse_task_fields(args: list[str]) -> ParsedFields:
    """
    Split "/add" style arguments:

      Buy milk | two liters !high @2024-06-01T18:00
    """
    fields = ParsedFields()
    words: list[str] = []
    for token in args:
        if token.startswith("!") and len(token) > 1:
            prio = _PRIORITY_WORDS.get(token[1:].lower())
            if prio is None:
                raise ValidationError(f"Unknown priority: {token[1:]!r} (low, medium, high)")
            fields.priority = prio
        elif token.startswith("@") and len(token) > 1:
            fields.due_date = _CLEAR if token == "@-" else parse_due(token[1:])
        else:
            words.append(token)

    text = " ".join(words)
    if "|" in text:
        title, description = text.split("|", 1)
        fields.title = title.strip()
        fields.description = description.strip()
    elif text.strip():
        fields.title = text.strip()
    return fields


def resolve_task_ref(state: AppState, ref: str) -> str | None:
    """
    Map a user reference to a task id.

    Accepts a 1-based position in the last rendered list, a full id or a unique id prefix.
    """
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(state.last_view):
            return state.last_view[n - 1].id

    cached = state.controller.tasks
    for t in cached:
        if t.id == ref:
            return t.id
    prefixed = [t.id for t in cached if t.id.startswith(ref)]
    if len(prefixed) == 1:
        return prefixed[0]
    return None


def _render_view(state: AppState) -> str:
    tasks = state.controller.visible_tasks()
    state.last_view = tasks
    return render_tasks(tasks, theme=state.theme)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _render_view(state)


async def cmd_reload(state: AppState, args: list[str]) -> str:
    if await state.controller.load_all() is None:
        return "Could not load tasks."
    return _render_view(state)


async def cmd_add(state: AppState, args: list[str]) -> str:
    try:
        fields = parse_task_fields(args)
    except ValidationError as exc:
        return str(exc)

    due = None if fields.due_date is _CLEAR else cast(datetime | None, fields.due_date)
    try:
        task = await state.controller.create_task(
            fields.title or "",
            fields.description or "",
            fields.priority if fields.priority is not None else Priority.MEDIUM,
            due,
        )
    except ValidationError:
        return "Usage: /add <title> [| description] [!low|!medium|!high] [@YYYY-MM-DD[THH:MM]]"
    if task is None:
        return "Task was not created."
    return _render_view(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /edit <n|id>"
    task_id = resolve_task_ref(state, args[0])
    if task_id is None:
        return f"No task matches {args[0]!r}."
    form = state.controller.begin_edit(task_id)
    if form is None:
        return "Task not found."
    return render_form(form, editing=True) + "\nUse /save [title] [| description] [!priority] [@due|@-] or /cancel."


async def cmd_save(state: AppState, args: list[str]) -> str:
    """
    /save                          -> submit the form as it is
    /save New title !high @-       -> change title, priority, clear due date
    """
    ctl = state.controller
    try:
        fields = parse_task_fields(args)
    except ValidationError as exc:
        return str(exc)

    form: TaskForm = replace(ctl.form)
    if fields.title is not None:
        form.title = fields.title
    if fields.description is not None:
        form.description = fields.description
    if fields.priority is not None:
        form.priority = fields.priority
    if fields.due_date is _CLEAR:
        form.due_date = None
    elif fields.due_date is not None:
        form.due_date = cast(datetime, fields.due_date)

    try:
        task = await ctl.submit(form)
    except ValidationError as exc:
        return str(exc)
    if task is None:
        return "Task was not saved."
    return _render_view(state)


def cmd_cancel(state: AppState, args: list[str]) -> str:
    ctl = state.controller
    if ctl.pending_delete_id is not None:
        ctl.cancel_delete()
        return "Deletion cancelled."
    if ctl.editing is not None:
        ctl.cancel_edit()
        return "Edit cancelled."
    return "Nothing to cancel."


async def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task_id = resolve_task_ref(state, args[0])
    if task_id is None:
        return f"No task matches {args[0]!r}."
    if await state.controller.dispatch(TaskCommand("toggle", task_id)) is None:
        return "Task status was not changed."
    return _render_view(state)


async def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <n|id>"
    task_id = resolve_task_ref(state, args[0])
    if task_id is None:
        return f"No task matches {args[0]!r}."
    await state.controller.dispatch(TaskCommand("delete", task_id))
    task = state.controller.get_task(task_id)
    title = task.title if task else task_id
    return (
        f"Delete {title!r}? This action cannot be undone.\n"
        "Use /confirm to delete or /cancel to keep it."
    )


async def cmd_confirm(state: AppState, args: list[str]) -> str:
    if state.controller.pending_delete_id is None:
        return "Nothing to confirm. Use /delete <n|id> first."
    await state.controller.dispatch(TaskCommand("confirm_delete", ""))
    return _render_view(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter status=active priority=high
    /filter status=all priority=all
    """
    current = state.controller.filter_spec
    status = current.status
    priority = current.priority

    for arg in args:
        key, _, value = arg.partition("=")
        key, value = key.lower(), value.lower()
        if key == "status":
            if value == "all":
                status = None
            elif value in _STATUS_WORDS:
                status = _STATUS_WORDS[value]
            else:
                return f"Unknown status: {value!r} (active, completed, all)"
        elif key == "priority":
            if value == "all":
                priority = None
            elif value in _PRIORITY_WORDS:
                priority = _PRIORITY_WORDS[value]
            else:
                return f"Unknown priority: {value!r} (low, medium, high, all)"
        else:
            return "Usage: /filter status=active|completed|all priority=low|medium|high|all"

    state.controller.set_filter(
        FilterSpec(
            status=status,
            priority=priority,
            sort_by=current.sort_by,
            sort_order=current.sort_order,
        )
    )
    return _render_view(state)


def cmd_sort(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in _SORT_WORDS:
        return "Usage: /sort created|due|priority|title [asc|desc]"
    current = state.controller.filter_spec
    order = current.sort_order
    if len(args) > 1:
        if args[1].lower() not in ("asc", "desc"):
            return "Sort order must be asc or desc."
        order = SortOrder(args[1].lower())

    state.controller.set_filter(
        FilterSpec(
            status=current.status,
            priority=current.priority,
            sort_by=_SORT_WORDS[args[0].lower()],
            sort_order=order,
        )
    )
    return _render_view(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    state.controller.clear_filters()
    return _render_view(state)


async def cmd_overdue(state: AppState, args: list[str]) -> str:
    if await state.controller.load_overdue() is None:
        return "Could not load overdue tasks."
    return _render_view(state) + "\n(Showing overdue tasks. Use /reload to see everything.)"


async def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <n|id>"
    task_id = resolve_task_ref(state, args[0])
    if task_id is None:
        return f"No task matches {args[0]!r}."
    task = await state.controller.refresh_task(task_id)
    if task is None:
        return "Could not load task."
    return render_task(1, task, theme=state.theme)


async def cmd_range(state: AppState, args: list[str]) -> str:
    """
    /range 2024-03-01 2024-03-31   -> tasks created in March (both days included)
    """
    if len(args) != 2:
        return "Usage: /range <from YYYY-MM-DD[THH:MM]> <to YYYY-MM-DD[THH:MM]>"
    try:
        date_from = parse_due(args[0])
        date_to = parse_due(args[1])
    except ValidationError as exc:
        return str(exc)
    if "T" not in args[1]:
        # A bare end date covers that whole day.
        date_to = date_to + timedelta(days=1, microseconds=-1)
    if date_to < date_from:
        return "The end of the range is before its start."

    if await state.controller.load_by_date_range(date_from, date_to) is None:
        return "Could not load tasks."
    return _render_view(state) + "\n(Showing tasks created in range. Use /reload to see everything.)"


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme        -> toggle
    /theme dark   -> set dark
    /theme light  -> set light
    """
    if not args:
        state.theme = state.theme_store.toggle()
    else:
        arg = args[0].lower()
        if arg not in ("light", "dark"):
            return "Usage: /theme [light|dark]"
        state.theme = Theme(arg)
        state.theme_store.save(state.theme)
    return f"{theme_icon(state.theme)} Theme: {state.theme.value}"


def cmd_status(state: AppState, args: list[str]) -> str:
    ctl = state.controller
    backend = getattr(state.settings, "store_backend", "?")
    editing = f"editing {ctl.editing.title!r}" if ctl.editing else "creating"
    return (
        "Status:\n"
        f"  Tasks loaded: {len(ctl.tasks)} (visible: {len(ctl.visible_tasks())})\n"
        f"  Filter: {describe_filter(ctl.filter_spec)}\n"
        f"  Mode: {editing}\n"
        f"  Theme: {state.theme.value}\n"
        f"  Store: {backend}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks with the current filter.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [| description] [!low|!medium|!high] [@YYYY-MM-DD[THH:MM]].",
)
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <n|id>.")
registry.register("save", cmd_save, help_text="Save the task being edited (same syntax as /add, @- clears due).")
registry.register("cancel", cmd_cancel, help_text="Cancel a pending delete or the current edit.")
registry.register("done", cmd_done, help_text="Toggle active/completed: /done <n|id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task (asks for /confirm): /delete <n|id>.", aliases=["rm"])
registry.register("confirm", cmd_confirm, help_text="Confirm the pending delete.")
registry.register(
    "filter",
    cmd_filter,
    help_text="Filter: /filter status=active|completed|all priority=low|medium|high|all.",
)
registry.register("sort", cmd_sort, help_text="Sort: /sort created|due|priority|title [asc|desc].")
registry.register("clear", cmd_clear, help_text="Reset filters and sorting.")
registry.register("overdue", cmd_overdue, help_text="Load only overdue active tasks.")
registry.register("range", cmd_range, help_text="Load tasks created in a range: /range <from> <to>.")
registry.register("show", cmd_show, help_text="Re-read one task from the store: /show <n|id>.")
registry.register("reload", cmd_reload, help_text="Reload all tasks from the store.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [light|dark].")
registry.register("status", cmd_status, help_text="Show counts, filter, edit mode and theme.")
