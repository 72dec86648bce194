"""Change notifications emitted by the task store."""

from __future__ import annotations

from enum import StrEnum


class StoreEvent(StrEnum):
    TASKS_LOADED = "tasks_loaded"
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    FILTER_CHANGED = "filter_changed"
    STATUS_CHANGED = "status_changed"
