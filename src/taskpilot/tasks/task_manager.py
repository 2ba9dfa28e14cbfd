# src/taskpilot/tasks/task_manager.py

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from ..core.ports import TaskFileRepo
from .errors import TaskNotFoundError, ValidationError
from .file_handler import DEFAULT_EXPORT_PATH
from .task_models import (
    DEFAULT_CATEGORY,
    PRIORITY_INVALID,
    Priority,
    Task,
    TaskKind,
    generate_task_id,
    parse_datetime,
    task_from_dict,
    task_to_dict,
)
from .validation import sanitize_input, validate_task_data

logger = logging.getLogger(__name__)

DEFAULT_DUE_SOON_DAYS = 7

_FAR_FUTURE = datetime.max.replace(tzinfo=UTC)

# Update keys accepted by update_task, mapped to Task attribute names.
_UPDATABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "dueDate": "due_date",
    "due_date": "due_date",
    "category": "category",
}
_KIND_FIELDS: dict[TaskKind, str] = {
    TaskKind.WORK: "project",
    TaskKind.PERSONAL: "location",
}

_SORT_KEYS: dict[str, Callable[[Task], Any]] = {
    "title": lambda t: t.title.casefold(),
    "priority": lambda t: t.priority.rank,
    "dueDate": lambda t: t.due_date or _FAR_FUTURE,
    "category": lambda t: t.category.casefold(),
    "createdAt": lambda t: t.created_at,
}
_SORT_ALIASES = {"due_date": "dueDate", "created_at": "createdAt"}


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    due_soon: int
    completion_rate: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _completion_rate(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # round half up
    return math.floor(completed * 100 / total + 0.5)


def _as_boundary(value: datetime | date | str) -> datetime:
    try:
        parsed = parse_datetime(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value}") from e
    if parsed is None:
        raise ValidationError(f"Invalid date: {value!r}")
    return parsed


class TaskManager:
    """
    Owns the live, ordered task list.

    Mutations persist the whole list through the injected repo and raise
    ValidationError / TaskNotFoundError. Queries never mutate and never persist.
    A failed save is logged but does not undo the in-memory change; call
    `save_tasks()` to check durability explicitly.
    """

    def __init__(self, file_handler: TaskFileRepo, *, due_soon_days: int = DEFAULT_DUE_SOON_DAYS) -> None:
        self._file_handler = file_handler
        self._tasks: list[Task] = []
        self._initialized = False
        self.due_soon_days = due_soon_days

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> int:
        self._tasks = self._file_handler.load_tasks()
        self._initialized = True
        logger.info("Loaded %d tasks", len(self._tasks))
        return len(self._tasks)

    def save_tasks(self) -> bool:
        ok = self._file_handler.save_tasks(self._tasks)
        if not ok:
            logger.warning("Tasks were changed in memory but could not be saved.")
        return ok

    # ---- CRUD ----

    def add_task(
        self,
        title: str,
        description: str | None = "",
        priority: Priority | str = Priority.MEDIUM,
        due_date: datetime | date | str | None = None,
        category: str | None = DEFAULT_CATEGORY,
        task_type: TaskKind | str | None = TaskKind.PLAIN,
        *,
        project: str | None = None,
        location: str | None = None,
    ) -> Task:
        title = sanitize_input(title)
        description = sanitize_input(description)
        category = sanitize_input(category)

        validation = validate_task_data({"title": title, "priority": priority, "dueDate": due_date})
        if not validation.is_valid:
            raise ValidationError(validation.errors, prefix="Failed to add task: ")

        try:
            task = Task(
                title,
                description,
                priority or Priority.MEDIUM,
                due_date,
                category,
                kind=TaskKind.from_selector(task_type),
                project=sanitize_input(project),
                location=sanitize_input(location),
            )
        except ValidationError as e:
            raise ValidationError(e.errors, prefix="Failed to add task: ") from e

        self._tasks.append(task)
        logger.debug("Task added id=%s kind=%s", task.id, task.kind.value)
        self.save_tasks()
        return task

    def update_task(self, task_id: str, updates: Mapping[str, Any]) -> Task:
        """
        Apply whitelisted fields from `updates` to a task.

        Keys not in the whitelist are ignored. Fields present in `updates` are
        validated together with the task's current values, so a partial update
        never fails on fields it does not touch.
        """
        task = self._require(task_id)

        allowed = dict(_UPDATABLE_FIELDS)
        extra = _KIND_FIELDS.get(task.kind)
        if extra:
            allowed[extra] = extra

        changes: dict[str, Any] = {}
        for key, value in updates.items():
            attr = allowed.get(key)
            if attr is None:
                logger.debug("Ignoring non-updatable field %r for task %s", key, task_id)
                continue
            changes[attr] = sanitize_input(value)

        validation = validate_task_data(
            {
                "title": changes.get("title", task.title),
                "priority": changes.get("priority", task.priority.value),
                "dueDate": changes.get("due_date"),
            }
        )
        if "priority" in changes and not changes["priority"]:
            validation.errors.append(PRIORITY_INVALID)
            validation.is_valid = False
        if not validation.is_valid:
            raise ValidationError(validation.errors, prefix="Failed to update task: ")

        for attr, value in changes.items():
            setattr(task, attr, value)

        logger.debug("Task updated id=%s fields=%s", task.id, sorted(changes))
        self.save_tasks()
        return task

    def delete_task(self, task_id: str) -> Task:
        task = self._require(task_id)
        self._tasks.remove(task)
        logger.debug("Task deleted id=%s", task.id)
        self.save_tasks()
        return task

    def toggle_task_completion(self, task_id: str) -> Task:
        task = self._require(task_id)
        if task.completed:
            task.mark_incomplete()
        else:
            task.mark_complete()
        self.save_tasks()
        return task

    # ---- lookups ----

    def find_task_by_id(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _require(self, task_id: str) -> Task:
        task = self.find_task_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def get_all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- queries ----

    def search_tasks(self, query: str) -> list[Task]:
        q = query.casefold()
        return [
            t
            for t in self._tasks
            if q in t.title.casefold() or q in t.description.casefold() or q in t.category.casefold()
        ]

    def filter_by_category(self, category: str) -> list[Task]:
        key = category.casefold()
        return [t for t in self._tasks if t.category.casefold() == key]

    def filter_by_priority(self, priority: Priority | str) -> list[Task]:
        key = str(priority).casefold()
        return [t for t in self._tasks if t.priority.value.casefold() == key]

    def filter_by_status(self, completed: bool) -> list[Task]:
        return [t for t in self._tasks if t.completed == bool(completed)]

    def get_overdue_tasks(self, now: datetime | None = None) -> list[Task]:
        return [t for t in self._tasks if t.is_overdue(now)]

    def get_tasks_due_soon(self, days: int | None = None, now: datetime | None = None) -> list[Task]:
        threshold = self.due_soon_days if days is None else days
        out: list[Task] = []
        for t in self._tasks:
            if t.completed:
                continue
            remaining = t.days_until_due(now)
            if remaining is not None and 0 <= remaining <= threshold:
                out.append(t)
        return out

    def advanced_filter(
        self,
        *,
        category: str | None = None,
        priority: Priority | str | None = None,
        completed: bool | None = None,
        date_from: datetime | date | str | None = None,
        date_to: datetime | date | str | None = None,
        overdue: bool | None = None,
        now: datetime | None = None,
    ) -> list[Task]:
        """
        AND-filter over the supplied criteria only.

        date_from / date_to bound created_at (inclusive). `overdue=False`
        keeps only tasks that are not overdue.
        """
        lower = _as_boundary(date_from) if date_from else None
        upper = _as_boundary(date_to) if date_to else None
        cat = category.casefold() if category else None
        prio = str(priority).casefold() if priority else None

        out: list[Task] = []
        for t in self._tasks:
            if cat is not None and t.category.casefold() != cat:
                continue
            if prio is not None and t.priority.value.casefold() != prio:
                continue
            if completed is not None and t.completed != bool(completed):
                continue
            if lower is not None and t.created_at < lower:
                continue
            if upper is not None and t.created_at > upper:
                continue
            if overdue is not None and t.is_overdue(now) != bool(overdue):
                continue
            out.append(t)
        return out

    def sort_tasks(self, sort_by: str = "createdAt", ascending: bool = True) -> list[Task]:
        """
        Sorted copy of the list; stored order is untouched.

        Keys: title, category (case-insensitive), priority (High > Medium > Low),
        dueDate (missing dates last when ascending), createdAt (default, also
        used for unknown keys). The sort is stable in both directions: ties keep
        insertion order.
        """
        name = _SORT_ALIASES.get(sort_by, sort_by)
        key = _SORT_KEYS.get(name, _SORT_KEYS["createdAt"])
        return sorted(self._tasks, key=key, reverse=not ascending)

    def get_task_stats(self, now: datetime | None = None) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue=len(self.get_overdue_tasks(now)),
            due_soon=len(self.get_tasks_due_soon(now=now)),
            completion_rate=_completion_rate(completed, total),
        )

    # ---- bulk ----

    def export_tasks(self, export_path: str | Path = DEFAULT_EXPORT_PATH) -> bool:
        return self._file_handler.export_tasks(self._tasks, export_path)

    def import_tasks(self, import_path: str | Path) -> int:
        """
        Append tasks from another file and persist. Returns the number imported.

        Tasks whose id already exists in the live list get a fresh id.
        """
        imported = self._file_handler.import_tasks(import_path)
        if not imported:
            return 0

        known = {t.id for t in self._tasks}
        for task in imported:
            if task.id in known:
                task = task_from_dict({**task_to_dict(task), "id": generate_task_id()})
            known.add(task.id)
            self._tasks.append(task)

        logger.info("Imported %d tasks from %s", len(imported), import_path)
        self.save_tasks()
        return len(imported)
