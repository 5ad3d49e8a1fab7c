# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskdeck.logging_setup import QUIET_ON_CONSOLE, _ConsoleFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_console_filter_levels() -> None:
    f = _ConsoleFilter(QUIET_ON_CONSOLE)

    assert f.filter(_record("taskdeck.tasks.task_controller", logging.DEBUG))
    assert not f.filter(_record("taskdeck.tasks.task_store", logging.INFO))
    assert f.filter(_record("taskdeck.tasks.task_store", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))
    # Prefix match is per dotted component.
    assert f.filter(_record("taskdeck.tasks.task_store_extra", logging.INFO))


def test_longest_quiet_prefix_wins() -> None:
    f = _ConsoleFilter({"taskdeck.tasks": logging.ERROR, "taskdeck.tasks.task_view": logging.DEBUG})
    assert f.filter(_record("taskdeck.tasks.task_view", logging.DEBUG))
    assert not f.filter(_record("taskdeck.tasks.task_service", logging.WARNING))


def test_setup_logging_writes_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)
    setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)
    assert len(logging.getLogger().handlers) == 2

    logging.getLogger("taskdeck.tasks.task_store").debug("Task added id=%s", "abc")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "taskdeck.log"
    assert "Task added id=abc" in log_file.read_text("utf-8")
