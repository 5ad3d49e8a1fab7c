# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.cli.bootstrap import create_initial_state
from taskdeck.core.state import AppState
from taskdeck.tasks.task_api import TaskApi
from taskdeck.tasks.task_client import ApiTaskStoreClient
from taskdeck.tasks.task_controller import TaskLifecycleController
from taskdeck.tasks.task_service import TaskService
from taskdeck.tasks.task_store import MemoryTaskStore

from .fakes import RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        console_enabled=False,
        store_backend="sqlite",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        prefs_path=tmp_path / "prefs.json",
        default_sort_by="created_at",
        default_sort_order="desc",
    )


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def repo() -> MemoryTaskStore:
    return MemoryTaskStore()


@pytest.fixture()
def client(repo: MemoryTaskStore) -> ApiTaskStoreClient:
    return ApiTaskStoreClient(TaskApi(TaskService(repo)))


@pytest.fixture()
def controller(client: ApiTaskStoreClient, notifier: RecordingNotifier) -> TaskLifecycleController:
    return TaskLifecycleController(client, notifier=notifier)


@pytest.fixture()
def state(settings: SimpleNamespace, notifier: RecordingNotifier) -> AppState:
    """
    AppState wired through the real composition root.

    NOTE: the SQLite store is kept real here because its correctness is part
    of what we want to test.
    """
    return create_initial_state(settings=settings, notifier=notifier)
