# tests/test_commands.py

from __future__ import annotations

import json
from datetime import datetime

import pytest

from taskdeck.cli.commands import CommandRegistry, parse_task_fields, registry
from taskdeck.cli.render import EMPTY_STATE
from taskdeck.core.theme import Theme
from taskdeck.tasks.task_errors import ValidationError
from taskdeck.tasks.task_models import Priority, TaskStatus


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x y") == "h2:x,y"
    assert await reg.handle(state, "/BEE", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]
    assert "/a - a" in reg.build_help()


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_add_then_list(state) -> None:
    out = await registry.handle(state, "/add Buy milk | two liters !high")
    assert "Buy milk" in out
    assert "two liters" in out

    task = state.controller.tasks[0]
    assert task.priority == Priority.HIGH
    assert task.description == "two liters"
    assert "Buy milk" in await registry.handle(state, "/ls")


@pytest.mark.asyncio
async def test_add_without_title_shows_usage(state) -> None:
    out = await registry.handle(state, "/add !high")
    assert out.startswith("Usage: /add")
    assert state.controller.tasks == []


@pytest.mark.asyncio
async def test_done_toggles_by_position(state) -> None:
    await registry.handle(state, "/add Water plants")
    out = await registry.handle(state, "/done 1")
    assert "[x] Water plants" in out
    assert state.controller.tasks[0].status == TaskStatus.COMPLETED

    assert "No task matches" in await registry.handle(state, "/done zzz")


@pytest.mark.asyncio
async def test_delete_requires_confirmation(state) -> None:
    await registry.handle(state, "/add Old idea")

    prompt = await registry.handle(state, "/delete 1")
    assert "cannot be undone" in prompt
    assert len(state.controller.tasks) == 1

    assert await registry.handle(state, "/cancel") == "Deletion cancelled."
    assert len(state.controller.tasks) == 1

    await registry.handle(state, "/rm 1")
    assert await registry.handle(state, "/confirm") == EMPTY_STATE
    assert state.controller.tasks == []
    assert "Nothing to confirm" in await registry.handle(state, "/confirm")


@pytest.mark.asyncio
async def test_edit_and_save(state) -> None:
    await registry.handle(state, "/add Draft !low @2030-01-01")

    form_text = await registry.handle(state, "/edit 1")
    assert form_text.startswith("Update Task:")
    assert "title: Draft" in form_text

    out = await registry.handle(state, "/save Final | reviewed !high @-")
    assert "Final" in out
    task = state.controller.tasks[0]
    assert (task.title, task.description, task.priority, task.due_date) == (
        "Final",
        "reviewed",
        Priority.HIGH,
        None,
    )
    assert state.controller.editing is None


@pytest.mark.asyncio
async def test_filter_sort_and_clear(state) -> None:
    await registry.handle(state, "/add banana")
    await registry.handle(state, "/add Apple")

    out = await registry.handle(state, "/sort title asc")
    assert out.index("Apple") < out.index("banana")

    assert await registry.handle(state, "/filter status=completed") == EMPTY_STATE
    assert "Unknown status" in await registry.handle(state, "/filter status=maybe")

    out = await registry.handle(state, "/clear")
    assert "Apple" in out and "banana" in out
    assert state.controller.filter_spec.status is None


@pytest.mark.asyncio
async def test_theme_toggle_is_persisted(state, settings) -> None:
    assert state.theme == Theme.LIGHT

    out = await registry.handle(state, "/theme")
    assert "dark" in out
    assert state.theme == Theme.DARK
    assert json.loads(settings.prefs_path.read_text("utf-8")) == {"theme": "dark"}

    await registry.handle(state, "/theme light")
    assert state.theme == Theme.LIGHT
    assert "Usage" in await registry.handle(state, "/theme blue")


@pytest.mark.asyncio
async def test_status_reports_backend(state) -> None:
    out = await registry.handle(state, "/status")
    assert "Store: sqlite" in out
    assert "Mode: creating" in out


def test_parse_task_fields() -> None:
    fields = parse_task_fields("Call mom | about Sunday !h @2024-06-01T18:00".split())
    assert fields.title == "Call mom"
    assert fields.description == "about Sunday"
    assert fields.priority == Priority.HIGH
    assert fields.due_date.year == 2024
    assert fields.due_date.tzinfo is not None

    bare = parse_task_fields([])
    assert bare.title is None and bare.priority is None and bare.due_date is None


@pytest.mark.parametrize("token", ["!urgent", "@tomorrow"])
def test_parse_task_fields_rejects_bad_tokens(token) -> None:
    with pytest.raises(ValidationError):
        parse_task_fields(["x", token])


@pytest.mark.asyncio
async def test_add_during_edit_then_save_keeps_edited_fields(state) -> None:
    await registry.handle(state, "/add Old title")
    await registry.handle(state, "/edit 1")
    await registry.handle(state, "/add Other")

    out = await registry.handle(state, "/save !high")
    assert "Please enter a task title" not in out
    edited = [t for t in state.controller.tasks if t.title == "Old title"]
    assert len(edited) == 1
    assert edited[0].priority == Priority.HIGH


@pytest.mark.asyncio
async def test_show_and_range(state) -> None:
    await registry.handle(state, "/add Plan trip")

    out = await registry.handle(state, "/show 1")
    assert "Plan trip" in out

    today = datetime.now().astimezone().date().isoformat()
    out = await registry.handle(state, f"/range {today} {today}")
    assert "Plan trip" in out
    assert await registry.handle(state, "/range 2000-01-01 2000-01-02") == EMPTY_STATE + (
        "\n(Showing tasks created in range. Use /reload to see everything.)"
    )
    assert "before its start" in await registry.handle(state, "/range 2000-01-02 2000-01-01")
