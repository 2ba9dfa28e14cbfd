# src/taskpilot/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task core.

TaskManager depends on this Protocol instead of FileHandler directly, so tests
can swap in an in-memory store.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class TaskFileRepo(Protocol):
    def load_tasks(self) -> list[Task]: ...

    def save_tasks(self, tasks: Iterable[Task]) -> bool: ...

    def export_tasks(self, tasks: Iterable[Task], export_path: str | Path) -> bool: ...

    def import_tasks(self, import_path: str | Path) -> list[Task] | None: ...
