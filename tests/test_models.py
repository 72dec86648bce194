from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from tasksync.exceptions import TaskPayloadError
from tasksync.models import Task, TaskDraft, TaskFilter, TaskPatch


def test_task_from_backend_payload() -> None:
    task = Task.from_payload(
        {
            "_id": "65f0",
            "title": "Buy milk",
            "description": None,
            "completed": False,
            "createdAt": "2026-01-01T10:00:00Z",
            "__v": 0,
        }
    )

    assert task.id == "65f0"
    assert task.description == ""
    assert task.created_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
    assert task.updated_at is None
    assert task.raw["__v"] == 0
    assert "_id" not in task.raw


def test_task_keeps_integer_ids() -> None:
    task = Task.from_payload({"id": 3, "title": "x"})
    assert task.id == 3


def test_task_without_title_is_payload_error() -> None:
    with pytest.raises(TaskPayloadError):
        Task.from_payload({"id": "1", "completed": True})


def test_task_is_immutable() -> None:
    task = Task.from_payload({"id": "1", "title": "x"})
    with pytest.raises(ValidationError):
        task.completed = True  # type: ignore[misc]


def test_to_patch_carries_updatable_fields_with_overrides() -> None:
    task = Task.from_payload({"id": "1", "title": "Buy milk", "description": "2l", "completed": False})

    patch = task.to_patch(completed=True)

    assert patch.to_body() == {"title": "Buy milk", "description": "2l", "completed": True}


def test_draft_defaults_and_title_validation() -> None:
    draft = TaskDraft(title="  Write spec ")
    assert draft.to_body() == {"title": "Write spec", "description": "", "completed": False}

    with pytest.raises(ValidationError):
        TaskDraft(title="   ")
    with pytest.raises(ValidationError):
        TaskDraft(title="x", priority="high")  # type: ignore[call-arg]


def test_patch_requires_all_updatable_fields() -> None:
    with pytest.raises(ValidationError):
        TaskPatch(title="x")  # type: ignore[call-arg]
    assert TaskPatch(title="x", completed=False).to_body() == {"title": "x", "description": "", "completed": False}


def test_filter_values() -> None:
    assert [item.value for item in TaskFilter] == ["all", "active", "completed"]
    assert TaskFilter("active") is TaskFilter.ACTIVE
