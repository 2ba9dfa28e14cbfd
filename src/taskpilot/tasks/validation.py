# src/taskpilot/tasks/validation.py

"""Stateless field checks run before a task is created or mutated."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .task_models import (
    DUE_DATE_INVALID,
    PRIORITY_INVALID,
    TITLE_REQUIRED,
    Priority,
    parse_datetime,
)

_ANGLE_BRACKETS = re.compile(r"[<>]")


@dataclass(slots=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def _due_date_of(data: Mapping[str, Any]) -> Any:
    if "dueDate" in data:
        return data["dueDate"]
    return data.get("due_date")


def validate_task_data(data: Mapping[str, Any]) -> ValidationResult:
    """
    Check title / priority / due date and collect every violation.

    - title missing or blank -> "Title is required"
    - priority given but not High/Medium/Low -> priority error
    - due date given but unparsable -> format error
    """
    errors: list[str] = []

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append(TITLE_REQUIRED)

    priority = data.get("priority")
    if priority and (not isinstance(priority, str) or priority not in {p.value for p in Priority}):
        errors.append(PRIORITY_INVALID)

    due = _due_date_of(data)
    if due:
        try:
            parse_datetime(due)
        except (TypeError, ValueError):
            errors.append(DUE_DATE_INVALID)

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_id(value: object) -> bool:
    return isinstance(value, str) and len(value) > 0


def sanitize_input(value: Any) -> Any:
    """Trim strings and drop "<" / ">". Not HTML escaping; other input is returned as-is."""
    if not isinstance(value, str):
        return value
    return _ANGLE_BRACKETS.sub("", value.strip())
