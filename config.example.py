# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/task_organizer/config.py.
"""

ENV_VARS = {
    # App / logging
    "TASKORG_APP_NAME": "App display name (default: task-organizer).",
    "TASKORG_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Presentation
    "TASKORG_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    "TASKORG_DATE_INPUT_FORMAT": "strptime format for due dates typed in /add (default: %Y-%m-%d).",
    "TASKORG_DATE_DISPLAY_FORMAT": "strftime format for due dates in listings (default: %b %d, %Y).",
    # Paths (gitignored)
    "TASKORG_DATA_DIR": "Local data directory for the log file and database (default: .local/task_organizer).",
    "TASKORG_DB_PATH": "SQLite database path (default: <data_dir>/tasks.sqlite3).",
    "TASKORG_DB_TIMEOUT_SECONDS": "SQLite busy timeout per connection (default: 30).",
}
