# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store stack: repository -> TaskService -> TaskApi -> ApiTaskStoreClient,
- builds the lifecycle controller and theme preference into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Notifier, TaskRepo
from ..core.state import AppState
from ..core.theme import ThemeStore
from ..tasks.task_api import TaskApi
from ..tasks.task_client import ApiTaskStoreClient
from ..tasks.task_controller import TaskLifecycleController
from ..tasks.task_errors import StoreError
from ..tasks.task_models import FilterSpec, SortBy, SortOrder
from ..tasks.task_service import TaskService
from ..tasks.task_store import MemoryTaskStore, TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.prefs_path.parent.mkdir(parents=True, exist_ok=True)


def create_repo(settings) -> TaskRepo:
    """SQLite unless configured otherwise; falls back to memory if SQLite cannot be opened."""
    if settings.store_backend == "memory":
        return MemoryTaskStore()
    try:
        return TaskStore(settings.tasks_db_path)
    except (StoreError, OSError):
        logger.warning(
            "Failed to open task database %s; using in-memory storage instead",
            settings.tasks_db_path,
            exc_info=True,
        )
        return MemoryTaskStore()


def initial_filter(settings) -> FilterSpec:
    return FilterSpec(
        sort_by=SortBy.from_wire(getattr(settings, "default_sort_by", None)),
        sort_order=SortOrder.from_wire(getattr(settings, "default_sort_order", "desc")),
    )


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repo = create_repo(settings)
    client = ApiTaskStoreClient(TaskApi(TaskService(repo)))
    controller = TaskLifecycleController(
        client,
        notifier=notifier,
        filter_spec=initial_filter(settings),
    )
    theme_store = ThemeStore(settings.prefs_path)

    return AppState(
        settings=settings,
        repo=repo,
        controller=controller,
        theme_store=theme_store,
        theme=theme_store.load(),
    )
