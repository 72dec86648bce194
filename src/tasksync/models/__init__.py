"""Data models for task API requests and responses."""

from tasksync.models._base import TaskSyncBaseModel
from tasksync.models.requests import TaskDraft, TaskPatch
from tasksync.models.task import Task, TaskFilter

__all__ = [
    "Task",
    "TaskDraft",
    "TaskFilter",
    "TaskPatch",
    "TaskSyncBaseModel",
]
