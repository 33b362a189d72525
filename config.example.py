# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep local overrides in .env (gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "SMART_APP_NAME": "App display name (default: smart-scheduler).",
    "SMART_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "SMART_DATA_DIR": "Local data directory for logs and tasks (default: .local/smart_scheduler).",
    "SMART_TASKS_FILE": "Default file for /save and /load (default: <data_dir>/tasks.json).",
    # Reminders
    "SMART_REMINDERS_ENABLED": "Run the background reminder scanner (true/false, default: true).",
    "SMART_REMINDER_INTERVAL_SECONDS": "Seconds between reminder scans (default: 60, min 0.5).",
    "SMART_REMINDER_WINDOW_MINUTES": "Remind when a deadline is this close (default: 5).",
    "SMART_REMINDER_MODE": (
        "every_tick (remind on every scan while due soon, default) or "
        "once_per_window (remind once per task)."
    ),
    # Views / persistence
    "SMART_HIGH_PRIORITY": "Priority shown by /high (1-5, default: 1).",
    "SMART_AUTOLOAD": "Load the tasks file at startup (true/false, default: false).",
    "SMART_AUTOSAVE": "Save the tasks file on exit (true/false, default: false).",
}
