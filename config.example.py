# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: event-planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Console
    "PLANNER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "PLANNER_DATA_DIR": "Local data directory (default: .local/event_planner).",
    "PLANNER_STORAGE_PATH": "Key-value storage JSON file (default: <data_dir>/storage.json).",
    "PLANNER_STORAGE_KEY": "Slot holding the serialized task list (default: tasks).",
    # Domain defaults
    "PLANNER_USER_ID": "Author id stamped on your own comments (default: user-1).",
    "PLANNER_DEFAULT_BUDGET_TOTAL": "Budget total for new events (default: 10000).",
}
