"""Task collection endpoints: ``/tasks/`` and ``/tasks/{id}``.

Each function performs one request through an :class:`HttpClient` and
returns normalized models. Errors from the transport propagate unchanged.
"""

from __future__ import annotations

from urllib.parse import quote

from tasksync._constants import TASKS_PATH
from tasksync._transport import HttpClient
from tasksync.ingestion.normalize import TaskId, ensure_task_list
from tasksync.models.requests import TaskDraft, TaskPatch
from tasksync.models.task import Task


def collection_path() -> str:
    return f"{TASKS_PATH}/"


def task_path(task_id: TaskId) -> str:
    """Per-task resource path; the id is URL-quoted."""
    return f"{TASKS_PATH}/{quote(str(task_id), safe='')}"


async def list_tasks(http: HttpClient) -> list[Task]:
    path = collection_path()
    payload = await http.get(path)
    return [Task.from_payload(item, path=path) for item in ensure_task_list(payload, path=path)]


async def create_task(http: HttpClient, draft: TaskDraft) -> Task:
    path = collection_path()
    payload = await http.post(path, draft.to_body())
    return Task.from_payload(payload, path=path)


async def update_task(http: HttpClient, task_id: TaskId, patch: TaskPatch) -> Task:
    path = task_path(task_id)
    payload = await http.put(path, patch.to_body())
    return Task.from_payload(payload, path=path)


async def delete_task(http: HttpClient, task_id: TaskId) -> None:
    await http.delete(task_path(task_id))
