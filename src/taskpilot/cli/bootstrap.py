# src/taskpilot/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires FileHandler into TaskManager,
- loads the task list into memory.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.file_handler import FileHandler
from ..tasks.task_manager import TaskManager

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, initialize: bool = True) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    file_handler = FileHandler(
        settings.tasks_path,
        settings.backup_path,
        ensure_dirs=settings.ensure_dirs,
    )
    manager = TaskManager(file_handler, due_soon_days=settings.due_soon_days)
    if initialize:
        count = manager.initialize()
        logger.info("Task list ready path=%s tasks=%d", settings.tasks_path, count)

    return AppState(
        settings=settings,
        manager=manager,
        color=bool(getattr(settings, "color", True)),
    )
