"""Custom exception hierarchy for tasksync."""

from __future__ import annotations


class TaskSyncError(Exception):
    """Base exception for all tasksync errors."""


class TaskSyncConfigError(TaskSyncError):
    """Invalid or missing configuration."""


class TaskTransportError(TaskSyncError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    ``status_code`` is ``None`` when no response was received at all
    (connection refused, DNS failure, timeout).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        method: str = "",
        path: str = "",
    ) -> None:
        self.status_code = status_code
        self.method = method
        self.path = path
        super().__init__(message)


class TaskPayloadError(TaskSyncError):
    """Response body is not shaped like a task or a list of tasks."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)
