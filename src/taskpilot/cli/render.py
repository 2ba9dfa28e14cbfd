# src/taskpilot/cli/render.py

"""Terminal rendering of tasks and stats (colorama; plain text when color is off)."""

from __future__ import annotations

from collections.abc import Sequence

from colorama import Fore, Style

from ..tasks.task_manager import TaskStats
from ..tasks.task_models import Priority, Task, TaskKind, format_task, local_date

PRIORITY_COLOR = {
    Priority.HIGH: Fore.RED,
    Priority.MEDIUM: Fore.YELLOW,
    Priority.LOW: Fore.BLUE,
}


def _c(text: str, *codes: str) -> str:
    return "".join(codes) + text + Style.RESET_ALL


def render_task(task: Task, *, color: bool = True) -> str:
    if not color:
        return format_task(task)

    glyph = _c("✓", Fore.GREEN) if task.completed else _c("○", Style.DIM)
    parts = [
        f"[{glyph}] {_c(task.title, Style.BRIGHT)}",
        _c(task.priority.value, PRIORITY_COLOR[task.priority]),
        _c(task.category, Fore.CYAN),
    ]
    if task.due_date is not None:
        due = f"Due: {local_date(task.due_date)}"
        if task.is_overdue():
            due += _c(" (OVERDUE)", Fore.RED)
        parts.append(due)
    if task.kind is TaskKind.WORK:
        parts.append(f"Project: {task.project}")
    elif task.kind is TaskKind.PERSONAL and task.location:
        parts.append(f"Location: {task.location}")
    return " | ".join(parts)


def render_task_list(tasks: Sequence[Task], *, color: bool = True, empty: str = "No tasks found.") -> str:
    if not tasks:
        return _c(empty, Style.DIM) if color else empty
    return "\n".join(f"{i}. {render_task(t, color=color)}" for i, t in enumerate(tasks, start=1))


def render_task_details(task: Task) -> str:
    lines = [
        f"ID:          {task.id}",
        f"Title:       {task.title}",
        f"Description: {task.description or '-'}",
        f"Priority:    {task.priority.value}",
        f"Category:    {task.category}",
        f"Status:      {'Completed' if task.completed else 'Pending'}",
        f"Created:     {task.created_at.astimezone():%Y-%m-%d %H:%M}",
    ]
    if task.due_date is not None:
        days = task.days_until_due()
        lines.append(f"Due:         {local_date(task.due_date)} ({days} days)")
    if task.kind is TaskKind.WORK:
        lines.append(f"Project:     {task.project}")
    elif task.kind is TaskKind.PERSONAL:
        lines.append(f"Location:    {task.location or '-'}")
    return "\n".join(lines)


def render_stats(stats: TaskStats) -> str:
    return (
        "Task statistics:\n"
        f"  Total:           {stats.total}\n"
        f"  Completed:       {stats.completed}\n"
        f"  Pending:         {stats.pending}\n"
        f"  Overdue:         {stats.overdue}\n"
        f"  Due soon:        {stats.due_soon}\n"
        f"  Completion rate: {stats.completion_rate}%"
    )
