"""Task model."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from tasksync.exceptions import TaskPayloadError
from tasksync.ingestion.normalize import TaskId, normalize_task_payload
from tasksync.models._base import TaskSyncBaseModel
from tasksync.models.requests import TaskPatch


class TaskFilter(StrEnum):
    """Display filter over the task collection."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class Task(TaskSyncBaseModel):
    """A task as returned by the backend.

    Instances are immutable; the store replaces entries instead of
    mutating them.
    """

    id: TaskId
    """Canonical identifier (``id`` or ``_id`` on the wire)."""
    title: str
    description: str = ""
    completed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, path: str = "") -> Task:
        """Normalize and validate a single task payload from the backend."""
        normalized = normalize_task_payload(payload, path=path)
        try:
            return cls.model_validate(normalized)
        except ValidationError as exc:
            raise TaskPayloadError(f"Invalid task payload: {exc}", path=path) from exc

    def to_patch(self, **changes: Any) -> TaskPatch:
        """Build an update body from this task's updatable fields."""
        fields: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
        }
        fields.update(changes)
        return TaskPatch(**fields)
