# tests/test_file_handler.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskpilot.tasks.file_handler import FileHandler
from taskpilot.tasks.task_models import Task, TaskKind, task_to_dict, work_task


def _write(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), "utf-8")


def _read(path: Path):
    return json.loads(path.read_text("utf-8"))


def test_load_missing_file_creates_empty_array(file_handler: FileHandler, tmp_path: Path) -> None:
    assert not file_handler.file_path.exists()

    assert file_handler.load_tasks() == []

    assert _read(file_handler.file_path) == []
    assert (tmp_path / "exports").is_dir()
    assert (tmp_path / "docs").is_dir()


def test_default_locations(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    handler = FileHandler()

    assert handler.load_tasks() == []
    assert (tmp_path / "tasks.json").exists()
    assert (tmp_path / "exports").is_dir()
    assert (tmp_path / "docs").is_dir()


def test_save_then_load(file_handler: FileHandler) -> None:
    tasks = [Task("One"), work_task("Two", project="Apollo")]
    tasks[0].mark_complete()

    assert file_handler.save_tasks(tasks) is True
    loaded = file_handler.load_tasks()

    assert [t.id for t in loaded] == [t.id for t in tasks]
    assert loaded[0].completed is True
    assert loaded[1].kind is TaskKind.WORK
    assert loaded[1].project == "Apollo"


def test_first_save_makes_no_backup(file_handler: FileHandler) -> None:
    assert file_handler.save_tasks([Task("One")]) is True
    assert not file_handler.backup_path.exists()


def test_save_keeps_previous_version_as_backup(file_handler: FileHandler) -> None:
    file_handler.save_tasks([Task("Initial")])
    file_handler.save_tasks([Task("Second")])
    file_handler.save_tasks([Task("Third")])

    assert [r["title"] for r in _read(file_handler.backup_path)] == ["Second"]
    assert [r["title"] for r in _read(file_handler.file_path)] == ["Third"]


def test_corrupted_primary_falls_back_to_backup(file_handler: FileHandler) -> None:
    backup_task = Task("From backup")
    _write(file_handler.backup_path, [task_to_dict(backup_task)])
    file_handler.file_path.write_text("{not json", "utf-8")

    loaded = file_handler.load_tasks()

    assert [t.id for t in loaded] == [backup_task.id]


def test_non_array_primary_falls_back_to_backup(file_handler: FileHandler) -> None:
    _write(file_handler.file_path, {"tasks": []})
    _write(file_handler.backup_path, [task_to_dict(Task("Saved"))])

    assert [t.title for t in file_handler.load_tasks()] == ["Saved"]


def test_invalid_record_falls_back_to_backup(file_handler: FileHandler) -> None:
    _write(file_handler.file_path, [{"id": "task_1", "title": ""}])
    _write(file_handler.backup_path, [task_to_dict(Task("Saved"))])

    assert [t.title for t in file_handler.load_tasks()] == ["Saved"]


def test_non_boolean_completed_falls_back_to_backup(file_handler: FileHandler) -> None:
    record = task_to_dict(Task("Shaky"))
    record["completed"] = "false"
    _write(file_handler.file_path, [record])
    _write(file_handler.backup_path, [task_to_dict(Task("Saved"))])

    assert [t.title for t in file_handler.load_tasks()] == ["Saved"]


def test_both_files_broken_gives_empty_list(file_handler: FileHandler) -> None:
    file_handler.file_path.write_text("garbage", "utf-8")
    file_handler.backup_path.write_text("also garbage", "utf-8")

    assert file_handler.load_tasks() == []


def test_save_failure_returns_false(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", "utf-8")
    handler = FileHandler(blocker / "tasks.json", tmp_path / "backup.json", ensure_dirs=[])

    assert handler.save_tasks([Task("x")]) is False


def test_export_creates_directory_and_leaves_primary_alone(file_handler: FileHandler, tmp_path: Path) -> None:
    target = tmp_path / "out" / "nested" / "export.json"
    tasks = [Task("One"), Task("Two")]

    assert file_handler.export_tasks(tasks, target) is True

    assert [r["title"] for r in _read(target)] == ["One", "Two"]
    assert not file_handler.file_path.exists()
    assert not file_handler.backup_path.exists()


def test_import_valid_file(file_handler: FileHandler, tmp_path: Path) -> None:
    source = tmp_path / "import.json"
    task = Task("Imported")
    _write(source, [task_to_dict(task)])

    imported = file_handler.import_tasks(source)

    assert imported is not None
    assert [t.id for t in imported] == [task.id]


def test_import_failures_return_none(file_handler: FileHandler, tmp_path: Path) -> None:
    bad_json = tmp_path / "bad.json"
    bad_json.write_text("[{", "utf-8")
    not_array = tmp_path / "object.json"
    _write(not_array, {"id": "task_1"})

    assert file_handler.import_tasks(tmp_path / "missing.json") is None
    assert file_handler.import_tasks(bad_json) is None
    assert file_handler.import_tasks(not_array) is None
