# src/taskpilot/tasks/task_models.py

"""
Task entity and its record format.

A task is one class with a kind tag (plain / work / personal). The tag decides
which extra field the task carries (project or location), how it serializes
and how it is displayed.

Fields are private and exposed through validated properties. Only this module
touches the private slots directly (see `task_from_dict`), so identifiers,
completion flags and creation timestamps can be restored from disk without
being writable by callers.
"""

from __future__ import annotations

import math
import re
import time
import uuid
from collections.abc import Mapping
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from .errors import ValidationError

DEFAULT_CATEGORY = "General"
DEFAULT_PROJECT = "General"
WORK_CATEGORY = "Work"
PERSONAL_CATEGORY = "Personal"

TITLE_REQUIRED = "Title is required"
PRIORITY_INVALID = "Priority must be High, Medium, or Low"
DUE_DATE_INVALID = "Invalid due date format"

SECONDS_PER_DAY = 24 * 60 * 60

_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Ordinal used for sorting: High=3 > Medium=2 > Low=1."""
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: object) -> Priority:
        """Exact (case-sensitive) match against the three values."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw)
            except ValueError:
                pass
        raise ValidationError(PRIORITY_INVALID)


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class TaskKind(StrEnum):
    PLAIN = "regular"
    WORK = "work"
    PERSONAL = "personal"

    @classmethod
    def from_selector(cls, raw: str | None) -> TaskKind:
        """Case-insensitive selector; anything unknown means a plain task."""
        if isinstance(raw, cls):
            return raw
        key = (raw or "").strip().lower()
        for kind in cls:
            if kind.value == key:
                return kind
        return cls.PLAIN


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (the precision we persist)."""
    return _truncate_ms(datetime.now(UTC))


def _truncate_ms(dt: datetime) -> datetime:
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def generate_task_id() -> str:
    return f"task_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def parse_datetime(value: object) -> datetime | None:
    """
    Parse a due date / timestamp into an aware UTC datetime.

    Accepted:
    - None or "" -> None
    - datetime (naive values are local time)
    - date -> midnight UTC
    - ISO-8601 string; a bare YYYY-MM-DD means midnight UTC, a naive
      date-time means local time, "Z" and offsets are honored

    Raises ValueError for anything else.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day, tzinfo=UTC)
    elif isinstance(value, str):
        raw = value.strip()
        if _DATE_ONLY.fullmatch(raw):
            d = date.fromisoformat(raw)
            dt = datetime(d.year, d.month, d.day, tzinfo=UTC)
        else:
            dt = datetime.fromisoformat(raw)
    else:
        raise ValueError(f"Unsupported date value: {value!r}")

    if dt.tzinfo is None:
        dt = dt.astimezone()
    return _truncate_ms(dt.astimezone(UTC))


def format_timestamp(dt: datetime) -> str:
    """ISO-8601 with millisecond precision and a trailing Z."""
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def local_date(dt: datetime) -> str:
    """Calendar date of `dt` in the local timezone, as shown to the user."""
    return f"{dt.astimezone():%Y-%m-%d}"


def _clean_title(title: object) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(TITLE_REQUIRED)
    return title.strip()


def _clean_due_date(value: object) -> datetime | None:
    try:
        return parse_datetime(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(DUE_DATE_INVALID) from e


class Task:
    """
    One to-do item.

    Invariants:
    - title is never empty (always stored trimmed)
    - priority is always a Priority member
    - id, kind and created_at never change after construction
    """

    __slots__ = (
        "_id",
        "_kind",
        "_title",
        "_description",
        "_priority",
        "_due_date",
        "_category",
        "_completed",
        "_created_at",
        "_project",
        "_location",
    )

    def __init__(
        self,
        title: str,
        description: str | None = "",
        priority: Priority | str = Priority.MEDIUM,
        due_date: datetime | date | str | None = None,
        category: str | None = DEFAULT_CATEGORY,
        *,
        kind: TaskKind = TaskKind.PLAIN,
        project: str | None = None,
        location: str | None = None,
    ) -> None:
        self._id = generate_task_id()
        self._kind = TaskKind(kind)
        self._title = _clean_title(title)
        self._description = description or ""
        self._priority = Priority.parse(priority)
        self._due_date = _clean_due_date(due_date)
        self._completed = False
        self._created_at = utc_now()
        self._project: str | None = None
        self._location: str | None = None

        if self._kind is TaskKind.WORK:
            self._category = WORK_CATEGORY
            self._project = project or DEFAULT_PROJECT
        elif self._kind is TaskKind.PERSONAL:
            self._category = PERSONAL_CATEGORY
            self._location = location or None
        else:
            self._category = category or DEFAULT_CATEGORY

    # ---- read-only ----

    @property
    def id(self) -> str:
        return self._id

    @property
    def kind(self) -> TaskKind:
        return self._kind

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def created_at(self) -> datetime:
        return self._created_at

    # ---- validated fields ----

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = _clean_title(value)

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str | None) -> None:
        self._description = value or ""

    @property
    def priority(self) -> Priority:
        return self._priority

    @priority.setter
    def priority(self, value: Priority | str) -> None:
        self._priority = Priority.parse(value)

    @property
    def due_date(self) -> datetime | None:
        return self._due_date

    @due_date.setter
    def due_date(self, value: datetime | date | str | None) -> None:
        self._due_date = _clean_due_date(value)

    @property
    def category(self) -> str:
        return self._category

    @category.setter
    def category(self, value: str | None) -> None:
        self._category = value or DEFAULT_CATEGORY

    @property
    def project(self) -> str | None:
        return self._project

    @project.setter
    def project(self, value: str | None) -> None:
        if self._kind is not TaskKind.WORK:
            raise ValidationError("Only work tasks have a project")
        self._project = value or DEFAULT_PROJECT

    @property
    def location(self) -> str | None:
        return self._location

    @location.setter
    def location(self, value: str | None) -> None:
        if self._kind is not TaskKind.PERSONAL:
            raise ValidationError("Only personal tasks have a location")
        self._location = value or None

    # ---- state ----

    def mark_complete(self) -> None:
        self._completed = True

    def mark_incomplete(self) -> None:
        self._completed = False

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self._due_date is None or self._completed:
            return False
        return self._due_date < (now or datetime.now(UTC))

    def days_until_due(self, now: datetime | None = None) -> int | None:
        """Signed whole days until the due date, rounded up; negative when overdue."""
        if self._due_date is None:
            return None
        delta = self._due_date - (now or datetime.now(UTC))
        return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)

    def __str__(self) -> str:
        return format_task(self)

    def __repr__(self) -> str:
        return (
            f"Task(id={self._id!r}, kind={self._kind.value}, title={self._title!r}, "
            f"priority={self._priority.value}, completed={self._completed})"
        )


def work_task(
    title: str,
    description: str | None = "",
    priority: Priority | str = Priority.MEDIUM,
    due_date: datetime | date | str | None = None,
    project: str | None = DEFAULT_PROJECT,
) -> Task:
    return Task(title, description, priority, due_date, kind=TaskKind.WORK, project=project)


def personal_task(
    title: str,
    description: str | None = "",
    priority: Priority | str = Priority.MEDIUM,
    due_date: datetime | date | str | None = None,
    location: str | None = None,
) -> Task:
    return Task(title, description, priority, due_date, kind=TaskKind.PERSONAL, location=location)


# ---- record conversion ----


def task_to_dict(task: Task) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "dueDate": format_timestamp(task.due_date) if task.due_date else None,
        "category": task.category,
        "completed": task.completed,
        "createdAt": format_timestamp(task.created_at),
    }
    if task.kind is TaskKind.WORK:
        record["project"] = task.project
    elif task.kind is TaskKind.PERSONAL:
        record["location"] = task.location
    return record


_KIND_CATEGORY = {TaskKind.WORK: WORK_CATEGORY, TaskKind.PERSONAL: PERSONAL_CATEGORY}


def _kind_of_record(data: Mapping[str, Any]) -> TaskKind:
    if "project" in data:
        return TaskKind.WORK
    if "location" in data:
        return TaskKind.PERSONAL
    return TaskKind.PLAIN


def task_from_dict(data: Mapping[str, Any]) -> Task:
    """
    Rebuild a task from its JSON record.

    The identifier, completed flag and createdAt are restored, not regenerated.
    Raises ValidationError for malformed records.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Task record must be an object")

    task = Task(
        data.get("title"),  # type: ignore[arg-type]
        data.get("description") or "",
        data.get("priority") or Priority.MEDIUM,
        data.get("dueDate"),
        data.get("category") or DEFAULT_CATEGORY,
        kind=_kind_of_record(data),
        project=data.get("project"),
        location=data.get("location"),
    )

    raw_id = data.get("id")
    if isinstance(raw_id, str) and raw_id:
        task._id = raw_id

    # Variants default their category at construction; an edited one is kept.
    if task.kind is not TaskKind.PLAIN:
        task._category = data.get("category") or _KIND_CATEGORY[task.kind]

    completed = data.get("completed", False)
    if not isinstance(completed, bool):
        raise ValidationError("Invalid completed flag")
    task._completed = completed

    raw_created = data.get("createdAt")
    if raw_created:
        try:
            created = parse_datetime(raw_created)
        except (TypeError, ValueError) as e:
            raise ValidationError("Invalid createdAt timestamp") from e
        if created is not None:
            task._created_at = created

    return task


def format_task(task: Task, now: datetime | None = None) -> str:
    """`[glyph] title | priority | category | due-info | extra-field` (plain text)."""
    glyph = "✓" if task.completed else "○"
    parts = [f"[{glyph}] {task.title}", task.priority.value, task.category]

    if task.due_date is not None:
        due = f"Due: {local_date(task.due_date)}"
        if task.is_overdue(now):
            due += " (OVERDUE)"
        parts.append(due)

    if task.kind is TaskKind.WORK:
        parts.append(f"Project: {task.project}")
    elif task.kind is TaskKind.PERSONAL and task.location:
        parts.append(f"Location: {task.location}")

    return " | ".join(parts)
