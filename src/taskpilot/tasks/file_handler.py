# src/taskpilot/tasks/file_handler.py

from __future__ import annotations

import json
import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .task_models import Task, task_from_dict, task_to_dict

logger = logging.getLogger(__name__)

DEFAULT_TASKS_PATH = Path("tasks.json")
DEFAULT_BACKUP_PATH = Path("tasks_backup.json")
DEFAULT_EXPORT_PATH = Path("exports") / "exported_tasks.json"
DEFAULT_ENSURE_DIRS: tuple[str, ...] = ("exports", "docs")


class TaskFileFormatError(ValueError):
    """The file parsed as JSON but its root is not an array."""


def _read_task_array(path: Path) -> list[Task]:
    data = json.loads(path.read_text("utf-8"))
    if not isinstance(data, list):
        raise TaskFileFormatError(f"Invalid tasks file format: {path}")
    return [task_from_dict(item) for item in data]


def _write_task_array(path: Path, tasks: Iterable[Task]) -> None:
    records: list[dict[str, Any]] = [task_to_dict(t) for t in tasks]
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(json.dumps(records, ensure_ascii=False, indent=2), "utf-8")
    os.replace(tmp, path)


class FileHandler:
    """
    JSON file storage for the task list.

    Recovery policy:
    - load: primary -> backup -> empty list (never raises)
    - save: copy primary to backup (best-effort) -> overwrite primary
    Only one backup generation is kept.
    """

    def __init__(
        self,
        file_path: str | Path = DEFAULT_TASKS_PATH,
        backup_path: str | Path = DEFAULT_BACKUP_PATH,
        ensure_dirs: Iterable[str | Path] = DEFAULT_ENSURE_DIRS,
    ) -> None:
        self.file_path = Path(file_path)
        self.backup_path = Path(backup_path)
        self.ensure_dirs = [Path(d) for d in ensure_dirs]

    def _ensure_directories(self) -> None:
        for d in self.ensure_dirs:
            d.mkdir(parents=True, exist_ok=True)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def _ensure_file_exists(self) -> None:
        if not self.file_path.exists():
            logger.info("Tasks file %s missing, creating an empty one.", self.file_path)
            _write_task_array(self.file_path, [])

    def load_tasks(self) -> list[Task]:
        try:
            self._ensure_directories()
            self._ensure_file_exists()
            tasks = _read_task_array(self.file_path)
            logger.debug("Loaded %d tasks from %s", len(tasks), self.file_path)
            return tasks
        except (OSError, ValueError, TypeError):
            logger.exception("Failed to load tasks from %s", self.file_path)

        try:
            tasks = _read_task_array(self.backup_path)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(
                "No usable backup at %s (%s), starting with an empty task list.",
                self.backup_path,
                e,
            )
            return []

        logger.warning("Loaded %d tasks from backup %s", len(tasks), self.backup_path)
        return tasks

    def create_backup(self) -> bool:
        """Copy the primary file over the backup. Returns False when there was nothing to copy."""
        if not self.file_path.exists():
            return False
        try:
            self.backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.file_path, self.backup_path)
            return True
        except OSError:
            logger.warning("Backup of %s to %s failed.", self.file_path, self.backup_path, exc_info=True)
            return False

    def save_tasks(self, tasks: Iterable[Task]) -> bool:
        try:
            self.create_backup()
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            task_list = list(tasks)
            _write_task_array(self.file_path, task_list)
            logger.debug("Saved %d tasks to %s", len(task_list), self.file_path)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save tasks to %s", self.file_path)
            return False

    def export_tasks(self, tasks: Iterable[Task], export_path: str | Path) -> bool:
        path = Path(export_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            task_list = list(tasks)
            _write_task_array(path, task_list)
            logger.info("Exported %d tasks to %s", len(task_list), path)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to export tasks to %s", path)
            return False

    def import_tasks(self, import_path: str | Path) -> list[Task] | None:
        """Tasks read from `import_path`, or None when the file is unreadable or malformed."""
        path = Path(import_path)
        try:
            tasks = _read_task_array(path)
        except (OSError, ValueError, TypeError):
            logger.exception("Failed to import tasks from %s", path)
            return None
        logger.info("Read %d tasks from %s", len(tasks), path)
        return tasks
