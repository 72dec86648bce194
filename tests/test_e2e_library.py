from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest
from aiohttp import test_utils, web

from tasksync import TaskDraft, TaskFilter, TaskSyncClient, TaskSyncConfig, TaskSyncError
from tasksync.exceptions import TaskTransportError


@dataclass
class FakeTaskServer:
    """Mongo-style REST backend: tasks carry ``_id`` and timestamps."""

    tasks: list[dict[str, Any]] = field(default_factory=list)
    calls: dict[str, int] = field(default_factory=dict)
    fail_next: set[str] = field(default_factory=set)
    garble_next_list: bool = False
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def _record(self, request: web.Request) -> None:
        key = f"{request.method} {request.path}"
        self.calls[key] = self.calls.get(key, 0) + 1
        if request.method in self.fail_next:
            self.fail_next.discard(request.method)
            raise web.HTTPInternalServerError(text='{"message": "boom"}', content_type="application/json")

    def _find(self, task_id: str) -> dict[str, Any]:
        for item in self.tasks:
            if item["_id"] == task_id:
                return item
        raise web.HTTPNotFound(text='{"message": "Task not found"}', content_type="application/json")

    async def list_tasks(self, request: web.Request) -> web.Response:
        self._record(request)
        if self.garble_next_list:
            self.garble_next_list = False
            return web.Response(
                body=b'[{"_id": "1", "title": "\xff\xfe"}]',
                content_type="application/json",
                charset="utf-8",
            )
        return web.json_response(self.tasks)

    async def create_task(self, request: web.Request) -> web.Response:
        self._record(request)
        body = await request.json()
        task = {
            "_id": f"65f0{next(self._ids):04d}",
            "title": body["title"],
            "description": body.get("description", ""),
            "completed": body.get("completed", False),
            "createdAt": "2026-01-01T10:00:00.000Z",
            "updatedAt": "2026-01-01T10:00:00.000Z",
            "__v": 0,
        }
        self.tasks.append(task)
        return web.json_response(task, status=201)

    async def update_task(self, request: web.Request) -> web.Response:
        self._record(request)
        task = self._find(request.match_info["task_id"])
        body = await request.json()
        assert set(body) == {"title", "description", "completed"}
        task.update(body, updatedAt="2026-01-02T10:00:00.000Z")
        return web.json_response(task)

    async def delete_task(self, request: web.Request) -> web.Response:
        self._record(request)
        task = self._find(request.match_info["task_id"])
        self.tasks.remove(task)
        return web.json_response({"message": "Task deleted"})

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/tasks/", self.list_tasks)
        app.router.add_post("/api/tasks/", self.create_task)
        app.router.add_put("/api/tasks/{task_id}", self.update_task)
        app.router.add_delete("/api/tasks/{task_id}", self.delete_task)
        return app


async def _start(backend: FakeTaskServer) -> tuple[test_utils.TestServer, TaskSyncConfig]:
    server = test_utils.TestServer(backend.app())
    await server.start_server()
    return server, TaskSyncConfig(base_url=str(server.make_url("/api")), token="t0k")


@pytest.mark.asyncio
async def test_full_task_lifecycle() -> None:
    backend = FakeTaskServer()
    server, config = await _start(backend)
    try:
        async with TaskSyncClient(config) as client:
            store = client.store
            assert await store.fetch_tasks() == []

            milk = await store.create_task(TaskDraft(title="Buy milk"))
            spec = await store.create_task(TaskDraft(title="Write spec", description="v2"))
            assert [task.id for task in store.tasks] == [milk.id, spec.id]
            assert milk.created_at is not None

            toggled = await store.toggle_task_completion(spec.id)
            assert toggled is not None and toggled.completed is True
            assert store.get_task(spec.id).updated_at != spec.updated_at

            store.set_filter(TaskFilter.COMPLETED)
            assert [task.id for task in store.filtered_tasks] == [spec.id]

            await store.delete_task(milk.id)
            assert store.get_task(milk.id) is None
            assert (store.active_tasks_count, store.completed_tasks_count) == (0, 1)

            # A fresh fetch agrees with the locally reconciled state.
            local = [(task.id, task.title, task.completed) for task in store.tasks]
            await store.fetch_tasks()
            assert [(task.id, task.title, task.completed) for task in store.tasks] == local
    finally:
        await server.close()

    assert backend.calls["GET /api/tasks/"] == 2
    assert backend.calls["POST /api/tasks/"] == 2


@pytest.mark.asyncio
async def test_server_failures_surface_through_store() -> None:
    backend = FakeTaskServer()
    server, config = await _start(backend)
    try:
        async with TaskSyncClient(config) as client:
            store = client.store
            await store.create_task(TaskDraft(title="Buy milk"))

            backend.fail_next.add("GET")
            assert await store.fetch_tasks() is None
            assert store.error == "Failed to load tasks. Please check if the backend is running."
            assert len(store.tasks) == 1

            with pytest.raises(TaskTransportError) as exc_info:
                await store.delete_task("does-not-exist")
            assert exc_info.value.status_code == 404
            assert store.error == "Failed to delete task. Please try again."
            assert len(store.tasks) == 1
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_client_reuses_external_session() -> None:
    backend = FakeTaskServer()
    server, config = await _start(backend)
    try:
        async with aiohttp.ClientSession() as session:
            async with TaskSyncClient(config, session=session) as client:
                await client.store.fetch_tasks()
            assert not session.closed
    finally:
        await server.close()


def test_store_requires_context_manager() -> None:
    client = TaskSyncClient(TaskSyncConfig())

    with pytest.raises(TaskSyncError):
        _ = client.store
    with pytest.raises(TaskSyncError):
        _ = client.http


@pytest.mark.asyncio
async def test_undecodable_list_body_sets_fetch_error() -> None:
    backend = FakeTaskServer()
    server, config = await _start(backend)
    try:
        async with TaskSyncClient(config) as client:
            store = client.store
            await store.create_task(TaskDraft(title="Buy milk"))

            backend.garble_next_list = True
            assert await store.fetch_tasks() is None
            assert store.error == "Failed to load tasks. Please check if the backend is running."
            assert store.loading is False
            assert [task.title for task in store.tasks] == ["Buy milk"]
    finally:
        await server.close()
