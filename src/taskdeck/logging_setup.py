# src/taskdeck/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

LOG_FILE_NAME = "taskdeck.log"

# Per-call store/API chatter interleaves with the task list, so the console
# only shows it once something goes wrong.
QUIET_ON_CONSOLE: Mapping[str, int] = {
    "taskdeck.tasks.task_store": logging.WARNING,
    "taskdeck.tasks.task_api": logging.WARNING,
    "taskdeck.tasks.task_client": logging.WARNING,
}


class _ConsoleFilter(logging.Filter):
    """
    Console-side filter.

    taskdeck loggers pass unless listed in quiet (longest prefix wins); anything
    else (third-party, captured py.warnings) needs ERROR.
    """

    def __init__(self, quiet: Mapping[str, int]) -> None:
        super().__init__()
        # Longest prefix first so "a.b.c" overrides "a.b".
        self._quiet = sorted(quiet.items(), key=lambda kv: len(kv[0]), reverse=True)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name != "taskdeck" and not name.startswith("taskdeck."):
            return record.levelno >= logging.ERROR

        for prefix, min_level in self._quiet:
            if name == prefix or name.startswith(prefix + "."):
                return record.levelno >= min_level
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdeck",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    quiet: Mapping[str, int] = QUIET_ON_CONSOLE,
) -> Path:
    """
    Route logs to stderr (filtered, at console_level) and to <log_dir>/taskdeck.log
    (everything from file_level up). Replaces existing root handlers, so calling it
    twice does not duplicate output.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleFilter(quiet))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
