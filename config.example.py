# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Every variable is optional; malformed values fall back to the default.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Front-end
    "TASKDECK_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Storage
    "TASKDECK_STORE_BACKEND": "sqlite or memory (default: sqlite; falls back to memory if the DB cannot be opened).",
    # Paths (gitignored)
    "TASKDECK_DATA_DIR": "Local data directory (default: .local/taskdeck).",
    "TASKDECK_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    "TASKDECK_PREFS_PATH": "Theme preference JSON path (default: <data_dir>/prefs.json).",
    # Initial view
    "TASKDECK_DEFAULT_SORT_BY": "created_at, due_date, priority or title (default: created_at).",
    "TASKDECK_DEFAULT_SORT_ORDER": "asc or desc (default: desc).",
}
