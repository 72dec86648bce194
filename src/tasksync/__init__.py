"""tasksync - Async Python client and state store for a REST task backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tasksync")
except PackageNotFoundError:
    __version__ = "0+local"
from tasksync._transport import AiohttpHttpClient, HttpClient
from tasksync.client import TaskSyncClient
from tasksync.config import TaskSyncConfig
from tasksync.exceptions import (
    TaskPayloadError,
    TaskSyncConfigError,
    TaskSyncError,
    TaskTransportError,
)
from tasksync.ingestion.normalize import canonical_task_id, normalize_task_payload
from tasksync.models import Task, TaskDraft, TaskFilter, TaskPatch
from tasksync.state.events import StoreEvent
from tasksync.state.store import TaskStore, TaskStoreState

__all__ = [
    "__version__",
    "AiohttpHttpClient",
    "HttpClient",
    "StoreEvent",
    "Task",
    "TaskDraft",
    "TaskFilter",
    "TaskPatch",
    "TaskPayloadError",
    "TaskStore",
    "TaskStoreState",
    "TaskSyncClient",
    "TaskSyncConfig",
    "TaskSyncConfigError",
    "TaskSyncError",
    "TaskTransportError",
    "canonical_task_id",
    "normalize_task_payload",
]
