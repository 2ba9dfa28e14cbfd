# src/taskpilot/cli/commands.py

from __future__ import annotations

import logging
import re
import shlex
from collections.abc import Callable
from pathlib import Path

from ..core.state import AppState
from ..tasks.errors import TaskError
from ..tasks.task_models import Task
from .render import render_stats, render_task, render_task_details, render_task_list

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_OPTION = re.compile(r"^([A-Za-z_]+)=(.*)$", re.DOTALL)
_TRUE = {"1", "true", "yes", "y", "on", "done", "completed"}
_FALSE = {"0", "false", "no", "n", "off", "pending", "open"}


class CommandRegistry:
    """Slash-command registry used by the console connector and one-shot CLI runs."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Task errors (validation, unknown id) come back as the reply text.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except TaskError as e:
            logger.info("/%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate `key=value` options from positional words."""
    positional: list[str] = []
    options: dict[str, str] = {}
    for arg in args:
        m = _OPTION.match(arg)
        if m:
            options[m.group(1).lower()] = m.group(2)
        else:
            positional.append(arg)
    return positional, options


def _parse_flag(raw: str) -> bool | None:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return None


def _priority(raw: str | None) -> str | None:
    """Accept "high" / "HIGH" on the command line; the model itself is case-sensitive."""
    return raw.strip().capitalize() if raw else raw


def _resolve(state: AppState, ref: str) -> str:
    """
    A task reference is its number in the last listing or its full id.
    Without a previous listing (one-shot runs), numbers follow stored order.
    """
    if ref.isdigit():
        listing = state.last_listing or [t.id for t in state.manager.get_all_tasks()]
        idx = int(ref) - 1
        if 0 <= idx < len(listing):
            return listing[idx]
    return ref


def _show(state: AppState, tasks: list[Task], *, empty: str = "No tasks found.") -> str:
    state.last_listing = [t.id for t in tasks]
    return render_task_list(tasks, color=state.color, empty=empty)


def _line(state: AppState, task: Task) -> str:
    return render_task(task, color=state.color)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                      -> all tasks in stored order
    /list sort=priority desc   -> sorted copy (title|priority|dueDate|category|createdAt)
    """
    positional, options = _split_options(args)
    sort_by = options.get("sort")
    if sort_by:
        ascending = "desc" not in {p.lower() for p in positional}
        tasks = state.manager.sort_tasks(sort_by, ascending)
    else:
        tasks = state.manager.get_all_tasks()
    return _show(state, tasks)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <number|id>"
    task = state.manager.find_task_by_id(_resolve(state, args[0]))
    if task is None:
        return "Error: Task not found"
    return render_task_details(task)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title words> [description=..] [priority=High|Medium|Low] [due=YYYY-MM-DD]
         [category=..] [type=regular|work|personal] [project=..] [location=..]
    """
    positional, options = _split_options(args)
    title = " ".join(positional)
    task = state.manager.add_task(
        title,
        options.get("description", ""),
        _priority(options.get("priority")) or "Medium",
        options.get("due") or options.get("duedate") or None,
        options.get("category") or "General",
        options.get("type", "regular"),
        project=options.get("project"),
        location=options.get("location"),
    )
    return f'Task "{task.title}" added.\n{_line(state, task)}'


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <number|id> title=.. description=.. priority=.. due=.. category=.. project=.. location=.."""
    positional, options = _split_options(args)
    if not positional or not options:
        return "Usage: /edit <number|id> key=value ..."

    updates: dict[str, str | None] = {}
    for key, value in options.items():
        if key in ("due", "duedate", "due_date"):
            updates["dueDate"] = value or None
        elif key == "priority":
            updates["priority"] = _priority(value)
        else:
            updates[key] = value

    task = state.manager.update_task(_resolve(state, positional[0]), updates)
    return f"Task updated.\n{_line(state, task)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <number|id>"
    task = state.manager.toggle_task_completion(_resolve(state, args[0]))
    status = "completed" if task.completed else "marked as pending"
    return f'Task "{task.title}" {status}.'


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <number|id>"
    task = state.manager.delete_task(_resolve(state, args[0]))
    state.last_listing = [tid for tid in state.last_listing if tid != task.id]
    return f'Task "{task.title}" deleted.'


def cmd_search(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /search <text>"
    query = " ".join(args)
    return _show(state, state.manager.search_tasks(query), empty=f'No tasks match "{query}".')


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter category=Work priority=High status=done|pending overdue=yes|no from=DATE to=DATE
    Criteria are combined with AND; omitted criteria are not applied.
    """
    _, options = _split_options(args)
    if not options:
        return "Usage: /filter category=.. priority=.. status=done|pending overdue=yes|no from=.. to=.."

    completed = _parse_flag(options["status"]) if "status" in options else None
    overdue = _parse_flag(options["overdue"]) if "overdue" in options else None
    tasks = state.manager.advanced_filter(
        category=options.get("category") or None,
        priority=options.get("priority") or None,
        completed=completed,
        date_from=options.get("from") or None,
        date_to=options.get("to") or None,
        overdue=overdue,
    )
    return _show(state, tasks, empty="No tasks match the filter criteria.")


def cmd_due(state: AppState, args: list[str]) -> str:
    """/due [days] -> pending tasks due within the next N days (default from settings)."""
    days = None
    if args:
        if not args[0].isdigit():
            return "Usage: /due [days]"
        days = int(args[0])
    return _show(state, state.manager.get_tasks_due_soon(days), empty="Nothing due soon.")


def cmd_overdue(state: AppState, args: list[str]) -> str:
    return _show(state, state.manager.get_overdue_tasks(), empty="No overdue tasks.")


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render_stats(state.manager.get_task_stats())


def cmd_export(state: AppState, args: list[str]) -> str:
    path = Path(args[0]) if args else Path(getattr(state.settings, "export_path", "exports/exported_tasks.json"))
    if state.manager.export_tasks(path):
        return f"Exported {len(state.manager)} tasks to {path}."
    return f"Export to {path} failed (see log)."


def cmd_import(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /import <path>"
    count = state.manager.import_tasks(args[0])
    return f"Imported {count} tasks from {args[0]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks: /list [sort=priority|title|dueDate|category|createdAt] [desc].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task in detail: /show <number|id>.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [priority=..] [due=YYYY-MM-DD] [category=..] [type=work|personal].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <number|id> key=value ...")
registry.register("done", cmd_done, help_text="Toggle completion: /done <number|id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <number|id>.", aliases=["delete"])
registry.register("search", cmd_search, help_text="Search title/description/category: /search <text>.")
registry.register("filter", cmd_filter, help_text="Filter tasks: /filter category=.. priority=.. status=.. overdue=.. from=.. to=..")
registry.register("due", cmd_due, help_text="Tasks due soon: /due [days].")
registry.register("overdue", cmd_overdue, help_text="Tasks past their due date.")
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("export", cmd_export, help_text="Export tasks to JSON: /export [path].")
registry.register("import", cmd_import, help_text="Import tasks from JSON: /import <path>.")
