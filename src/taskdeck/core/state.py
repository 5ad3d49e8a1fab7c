# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_controller import TaskLifecycleController
from ..tasks.task_models import Task
from .ports import TaskRepo, ThemeRepo
from .theme import Theme


@dataclass(slots=True)
class AppState:
    """
    Explicit application state shared by commands and connectors.

    settings is usually taskdeck.config.Settings, but tests may pass a simpler
    object (e.g. SimpleNamespace) exposing the same attributes.
    """

    settings: Any
    repo: TaskRepo
    controller: TaskLifecycleController
    theme_store: ThemeRepo
    theme: Theme = Theme.LIGHT

    # Tasks exactly as last rendered; "/done 2" refers to position 2 here.
    last_view: list[Task] = field(default_factory=list)
