# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPILOT_APP_NAME": "App display name (default: taskpilot).",
    "TASKPILOT_LOG_LEVEL": "File log level (default: INFO).",
    "TASKPILOT_LOG_DIR": "Directory for taskpilot.log (default: .local/taskpilot).",
    # Storage
    "TASKPILOT_TASKS_PATH": "Primary task file (default: tasks.json).",
    "TASKPILOT_BACKUP_PATH": "Backup of the previous save (default: <tasks stem>_backup.json).",
    "TASKPILOT_EXPORT_PATH": "Default /export target (default: exports/exported_tasks.json).",
    "TASKPILOT_ENSURE_DIRS": "Directories created on first load (default: exports docs).",
    # Behaviour
    "TASKPILOT_DUE_SOON_DAYS": "Window for 'due soon' in /due and /stats (default: 7).",
    "TASKPILOT_COLOR": "Colorize output (true/false, default: true; NO_COLOR also disables).",
}
