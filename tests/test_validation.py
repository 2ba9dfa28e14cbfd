# tests/test_validation.py

from __future__ import annotations

import pytest

from taskpilot.tasks.validation import sanitize_input, validate_id, validate_task_data


def test_valid_data_passes() -> None:
    result = validate_task_data({"title": "Buy milk", "priority": "Low", "dueDate": "2025-01-10"})
    assert result.is_valid is True
    assert result.errors == []


def test_priority_and_due_date_are_optional() -> None:
    assert validate_task_data({"title": "Buy milk"}).is_valid is True
    assert validate_task_data({"title": "Buy milk", "priority": None, "dueDate": None}).is_valid is True


def test_collects_all_errors_in_order() -> None:
    result = validate_task_data({"title": "  ", "priority": "Urgent", "dueDate": "not-a-date"})
    assert result.is_valid is False
    assert result.errors == [
        "Title is required",
        "Priority must be High, Medium, or Low",
        "Invalid due date format",
    ]


def test_non_string_priority_is_reported() -> None:
    result = validate_task_data({"title": "x", "priority": ["High"]})
    assert result.errors == ["Priority must be High, Medium, or Low"]


def test_missing_title() -> None:
    result = validate_task_data({})
    assert result.errors == ["Title is required"]


def test_due_date_snake_case_key() -> None:
    result = validate_task_data({"title": "x", "due_date": "2025-13-45"})
    assert result.errors == ["Invalid due date format"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [("task_1", True), ("x", True), ("", False), (None, False), (123, False)],
)
def test_validate_id(value, expected) -> None:
    assert validate_id(value) is expected


def test_sanitize_input_strips_brackets_only() -> None:
    assert sanitize_input("  <b>hello</b>  ") == "bhello/b"
    assert sanitize_input("<script>alert(1)</script>") == "scriptalert(1)/script"
    # Not an HTML sanitizer: entities and quotes pass through untouched.
    assert sanitize_input("&lt;b&gt; \"x\"") == "&lt;b&gt; \"x\""


def test_sanitize_input_leaves_non_strings() -> None:
    assert sanitize_input(42) == 42
    assert sanitize_input(None) is None
    flag = object()
    assert sanitize_input(flag) is flag
