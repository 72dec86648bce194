"""In-memory task store synchronized with the REST backend.

This is the only component allowed to change the task collection. Every
change is confirmed by the backend first: there are no optimistic inserts,
updates or removals.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tasksync._api import tasks as _tasks_api
from tasksync._constants import (
    CREATE_FAILED_MESSAGE,
    DELETE_FAILED_MESSAGE,
    FETCH_FAILED_MESSAGE,
    UPDATE_FAILED_MESSAGE,
)
from tasksync._transport import HttpClient
from tasksync.exceptions import TaskSyncError
from tasksync.ingestion.normalize import TaskId, same_task_id
from tasksync.models.requests import TaskDraft, TaskPatch
from tasksync.models.task import Task, TaskFilter
from tasksync.state.events import StoreEvent
from tasksync.state.views import count_active, count_completed, filter_tasks

_logger = logging.getLogger(__name__)

_BODY_FIELDS = ("title", "description", "completed")


class TaskStoreState(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tasks: list[Task] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None
    filter: str = TaskFilter.ALL.value


StoreListener = Callable[[StoreEvent, "TaskStore"], None]


@dataclass(slots=True)
class _TaskGuard:
    """Per-id lock plus the number of operations holding or waiting on it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


def _coerce_draft(draft: TaskDraft | Mapping[str, Any]) -> TaskDraft:
    if isinstance(draft, TaskDraft):
        return draft
    return TaskDraft(**{key: draft[key] for key in _BODY_FIELDS if key in draft})


def _coerce_patch(patch: TaskPatch | Mapping[str, Any]) -> TaskPatch:
    if isinstance(patch, TaskPatch):
        return patch
    return TaskPatch(**{key: patch[key] for key in _BODY_FIELDS if key in patch})


class TaskStore:
    """Authoritative cache of tasks for one application session.

    Usage::

        store = TaskStore(http)
        await store.fetch_tasks()
        await store.create_task(TaskDraft(title="Buy milk"))
        store.set_filter(TaskFilter.ACTIVE)
        visible = store.filtered_tasks

    ``fetch_tasks`` never raises for backend failures; it records the
    failure in :attr:`error`. ``create_task``, ``update_task``,
    ``toggle_task_completion`` and ``delete_task`` record the failure
    *and* re-raise the :class:`TaskSyncError`.
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http
        self._state = TaskStoreState()
        self._in_flight = 0
        self._guards: dict[str, _TaskGuard] = {}
        self._listeners: list[StoreListener] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        return list(self._state.tasks)

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def filter(self) -> str:
        return self._state.filter

    @property
    def filtered_tasks(self) -> list[Task]:
        return filter_tasks(self._state.tasks, self._state.filter)

    @property
    def active_tasks_count(self) -> int:
        return count_active(self._state.tasks)

    @property
    def completed_tasks_count(self) -> int:
        return count_completed(self._state.tasks)

    def get_task(self, task_id: TaskId) -> Task | None:
        index = self._index_of(task_id)
        return None if index is None else self._state.tasks[index]

    def snapshot(self) -> TaskStoreState:
        """Deep copy of the current state."""
        return self._state.model_copy(deep=True)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call *listener* after every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index_of(self, task_id: TaskId) -> int | None:
        for index, task in enumerate(self._state.tasks):
            if same_task_id(task.id, task_id):
                return index
        return None

    def _emit(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception:
                _logger.debug("Store listener failed for %s", event, exc_info=True)

    @contextlib.contextmanager
    def _request(self) -> Iterator[None]:
        """Track one in-flight request: clears ``error``, holds ``loading``."""
        self._in_flight += 1
        self._state.loading = True
        self._state.error = None
        self._emit(StoreEvent.STATUS_CHANGED)
        try:
            yield
        finally:
            self._in_flight -= 1
            self._state.loading = self._in_flight > 0
            self._emit(StoreEvent.STATUS_CHANGED)

    @contextlib.asynccontextmanager
    async def _task_guard(self, task_id: TaskId) -> AsyncIterator[None]:
        """Serialize update/toggle/delete operations on the same task id."""
        key = str(task_id)
        guard = self._guards.get(key)
        if guard is None:
            guard = self._guards[key] = _TaskGuard()
        guard.users += 1
        try:
            async with guard.lock:
                yield
        finally:
            guard.users -= 1
            if guard.users == 0 and self._guards.get(key) is guard:
                del self._guards[key]

    def _fail(self, message: str, log_message: str, *args: Any) -> None:
        self._state.error = message
        _logger.warning(log_message, *args, exc_info=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch_tasks(self) -> list[Task] | None:
        """Replace the collection with the backend's list.

        Returns the loaded tasks, or ``None`` when the request failed (the
        previous collection is kept and :attr:`error` is set).
        """
        with self._request():
            try:
                tasks = await _tasks_api.list_tasks(self._http)
            except TaskSyncError:
                self._fail(FETCH_FAILED_MESSAGE, "Error fetching tasks")
                return None
            self._state.tasks = list(tasks)
            _logger.info("Loaded %d tasks", len(tasks))
            self._emit(StoreEvent.TASKS_LOADED)
            return list(tasks)

    async def create_task(self, draft: TaskDraft | Mapping[str, Any]) -> Task:
        """Create a task on the backend, then append the server's copy.

        A mapping is validated as a :class:`TaskDraft`; keys other than
        ``title``, ``description`` and ``completed`` are not sent.
        """
        body = _coerce_draft(draft)
        with self._request():
            try:
                task = await _tasks_api.create_task(self._http, body)
            except TaskSyncError:
                self._fail(CREATE_FAILED_MESSAGE, "Error creating task")
                raise
            index = self._index_of(task.id)
            if index is None:
                self._state.tasks.append(task)
            else:
                # A fetch that completed meanwhile already brought this task in.
                self._state.tasks[index] = task
            _logger.info("Task created: %s", task.title)
            self._emit(StoreEvent.TASK_CREATED)
            return task

    async def update_task(self, task_id: TaskId, patch: TaskPatch | Mapping[str, Any]) -> Task:
        """Send ``title``, ``description`` and ``completed``; store the server's copy.

        Keys other than the three updatable fields are not sent.
        """
        body = _coerce_patch(patch)
        async with self._task_guard(task_id):
            return await self._update_locked(task_id, body)

    async def _update_locked(self, task_id: TaskId, patch: TaskPatch) -> Task:
        with self._request():
            try:
                task = await _tasks_api.update_task(self._http, task_id, patch)
            except TaskSyncError:
                self._fail(UPDATE_FAILED_MESSAGE, "Error updating task %s", task_id)
                raise
            index = self._index_of(task_id)
            if index is None:
                _logger.warning("Updated task %s is not in the local list; left unchanged", task_id)
                return task
            self._state.tasks[index] = task
            _logger.info("Task updated: %s", task.title)
            self._emit(StoreEvent.TASK_UPDATED)
            return task

    async def toggle_task_completion(self, task_id: TaskId) -> Task | None:
        """Flip ``completed`` on a known task.

        Returns ``None`` without touching state when the id is unknown.
        Backend failures propagate like :meth:`update_task`.
        """
        async with self._task_guard(task_id):
            task = self.get_task(task_id)
            if task is None:
                _logger.warning("Task not found: %s", task_id)
                return None
            return await self._update_locked(task.id, task.to_patch(completed=not task.completed))

    async def delete_task(self, task_id: TaskId) -> None:
        """Delete on the backend, then drop every local entry with that id."""
        async with self._task_guard(task_id):
            with self._request():
                try:
                    await _tasks_api.delete_task(self._http, task_id)
                except TaskSyncError:
                    self._fail(DELETE_FAILED_MESSAGE, "Error deleting task %s", task_id)
                    raise
                self._state.tasks = [task for task in self._state.tasks if not same_task_id(task.id, task_id)]
                _logger.info("Task deleted: %s", task_id)
                self._emit(StoreEvent.TASK_DELETED)

    def set_filter(self, value: TaskFilter | str) -> None:
        """Change the display filter. The value is stored as given."""
        self._state.filter = value
        _logger.debug("Filter changed to: %s", value)
        self._emit(StoreEvent.FILTER_CHANGED)
