# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` or environment variables; this file only supports the names below.
"""

# Keep tasks somewhere other than the current directory
# TASKS_PATH = "/home/me/notes/tasks.json"
# BACKUP_PATH = "/home/me/notes/tasks_backup.json"

# Wider "due soon" window
# DUE_SOON_DAYS = 14

# Plain output (e.g. when piping)
# COLOR = False
