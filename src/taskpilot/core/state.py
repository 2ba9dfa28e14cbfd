# src/taskpilot/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_manager import TaskManager


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in with the same attributes).
    settings: object

    manager: TaskManager
    color: bool = True

    # Task ids in the order they were last shown, so commands can refer to "#3".
    last_listing: list[str] = field(default_factory=list)
