# tests/conftest.py

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpilot.cli.bootstrap import create_initial_state
from taskpilot.core.state import AppState
from taskpilot.tasks.file_handler import FileHandler
from taskpilot.tasks.task_manager import TaskManager

# Fixed "current time" for date-dependent assertions.
NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def local_tz() -> Iterator[Callable[[str], None]]:
    """
    Local timezone pinned to UTC so displayed dates are stable.
    Tests can switch it with the yielded setter (POSIX only, needs time.tzset).
    """
    original = os.environ.get("TZ")

    def set_tz(name: str) -> None:
        os.environ["TZ"] = name
        time.tzset()

    if hasattr(time, "tzset"):
        set_tz("UTC0")

    yield set_tz

    if hasattr(time, "tzset"):
        if original is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = original
        time.tzset()


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    so every test gets its own files under tmp_path.
    """
    return SimpleNamespace(
        app_name="taskpilot",
        tasks_path=tmp_path / "tasks.json",
        backup_path=tmp_path / "tasks_backup.json",
        export_path=tmp_path / "exports" / "exported_tasks.json",
        ensure_dirs=[tmp_path / "exports", tmp_path / "docs"],
        due_soon_days=7,
        color=False,
    )


@pytest.fixture()
def file_handler(settings: SimpleNamespace) -> FileHandler:
    return FileHandler(settings.tasks_path, settings.backup_path, ensure_dirs=settings.ensure_dirs)


@pytest.fixture()
def manager(file_handler: FileHandler) -> TaskManager:
    """TaskManager over real JSON files in tmp_path (persistence is part of what we test)."""
    m = TaskManager(file_handler)
    m.initialize()
    return m


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings)
