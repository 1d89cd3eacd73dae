# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODOLIST_APP_NAME": "App display name (default: todolist).",
    "TODOLIST_LOG_LEVEL": "Console logging level (default: WARNING). The file log is always DEBUG.",
    # Paths (gitignored)
    "TODOLIST_DATA_DIR": "Local data directory, also holds todolist.log (default: .local/todolist).",
    # Storage
    "TODOLIST_STORE_BACKEND": "json | sqlite | memory (default: json).",
    "TODOLIST_STORE_PATH": (
        "json: directory of <key>.json files (default: <data_dir>/store); "
        "sqlite: database file (default: <data_dir>/todos.sqlite3)."
    ),
    "TODOLIST_STORAGE_KEY": "Key the todo list is stored under (default: todos-app-data).",
    "TODOLIST_PERSIST_EMPTY": (
        "Write an empty list when the last todo is deleted (true/false, default: false). "
        "With false the previous snapshot stays in storage until /clear all."
    ),
    # View defaults
    "TODOLIST_DEFAULT_FILTER": "all | active | completed (default: all).",
    "TODOLIST_DEFAULT_SORT": "date | alphabetical | priority (default: date).",
}
