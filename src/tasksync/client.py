"""High-level async client wiring configuration, transport and store."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from tasksync._transport import AiohttpHttpClient, HttpClient
from tasksync.config import TaskSyncConfig
from tasksync.exceptions import TaskSyncError
from tasksync.state.store import TaskStore

_logger = logging.getLogger(__name__)


class TaskSyncClient:
    """Async client owning the HTTP session and the session's task store.

    Usage::

        async with TaskSyncClient(TaskSyncConfig.from_env()) as client:
            await client.store.fetch_tasks()
            print(client.store.active_tasks_count)

    Pass ``session`` to reuse an existing ``aiohttp.ClientSession``; it is
    then left open on exit.
    """

    def __init__(
        self,
        config: TaskSyncConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config if config is not None else TaskSyncConfig()
        self._external_session = session is not None
        self._http_session = session
        self._http: HttpClient | None = None
        self._store: TaskStore | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TaskSyncClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._http = AiohttpHttpClient(self._config, self._http_session)
        self._store = TaskStore(self._http)
        _logger.debug("Task client ready for %s", self._config.base_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._http = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> TaskSyncConfig:
        return self._config

    @property
    def http(self) -> HttpClient:
        if self._http is None:
            raise TaskSyncError("Client not initialized. Use 'async with TaskSyncClient(...) as client:'")
        return self._http

    @property
    def store(self) -> TaskStore:
        """The task store; it outlives the HTTP session so its state stays readable."""
        if self._store is None:
            raise TaskSyncError("Client not initialized. Use 'async with TaskSyncClient(...) as client:'")
        return self._store
