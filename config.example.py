# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Front-end
    "TODO_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Storage
    "TODO_STORAGE_BACKEND": "sqlite (default) or memory (nothing persisted).",
    "TODO_DATA_DIR": "Local data directory (default: .local/todo).",
    "TODO_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Sharing
    "TODO_SHARE_PATH": "If set, /share writes the task list to this file instead of printing it.",
}
