# src/taskpilot/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for errors surfaced to the presentation layer."""


class ValidationError(TaskError, ValueError):
    """One or more task fields are invalid. `errors` keeps every violation in order."""

    def __init__(self, errors: list[str] | str, *, prefix: str = "") -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        message = ", ".join(self.errors)
        super().__init__(f"{prefix}{message}" if prefix else message)


class TaskNotFoundError(TaskError, LookupError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__("Task not found")
