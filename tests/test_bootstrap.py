# tests/test_bootstrap.py

from __future__ import annotations

import pytest

from taskdeck.cli.bootstrap import create_initial_state, create_repo, initial_filter
from taskdeck.core.theme import Theme
from taskdeck.tasks.task_models import SortBy, SortOrder
from taskdeck.tasks.task_store import MemoryTaskStore, TaskStore


def test_sqlite_backend_by_default(state, settings) -> None:
    assert isinstance(state.repo, TaskStore)
    assert settings.tasks_db_path.exists()
    assert state.theme == Theme.LIGHT


def test_memory_backend(settings) -> None:
    settings.store_backend = "memory"
    assert isinstance(create_repo(settings), MemoryTaskStore)


def test_unusable_database_falls_back_to_memory(settings) -> None:
    # A directory where the database file should be cannot be opened by SQLite.
    settings.tasks_db_path.mkdir(parents=True)
    assert isinstance(create_repo(settings), MemoryTaskStore)


def test_initial_filter_from_settings(settings) -> None:
    settings.default_sort_by = "priority"
    settings.default_sort_order = "asc"
    spec = initial_filter(settings)
    assert (spec.sort_by, spec.sort_order) == (SortBy.PRIORITY, SortOrder.ASC)
    assert spec.status is None and spec.priority is None


@pytest.mark.asyncio
async def test_tasks_survive_a_restart(settings, notifier) -> None:
    first = create_initial_state(settings=settings, notifier=notifier)
    await first.controller.create_task("Persist me")

    second = create_initial_state(settings=settings, notifier=notifier)
    loaded = await second.controller.load_all()
    assert [t.title for t in loaded] == ["Persist me"]
