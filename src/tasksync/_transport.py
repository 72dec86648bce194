"""HTTP transport for the task REST API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from tasksync._redact import redact_headers, truncate_for_log
from tasksync.config import TaskSyncConfig
from tasksync.exceptions import TaskTransportError

_logger = logging.getLogger(__name__)


class HttpClient(Protocol):
    """Structural transport interface consumed by the store.

    Every method returns the decoded JSON body (``None`` for an empty body)
    and raises :class:`TaskTransportError` on any non-2xx status or
    transport-level failure. Having a protocol here makes it easy to pass
    test doubles while keeping the production implementation concrete.
    """

    async def get(self, path: str) -> Any: ...

    async def post(self, path: str, json: Any) -> Any: ...

    async def put(self, path: str, json: Any) -> Any: ...

    async def delete(self, path: str) -> Any: ...


def _decode_body(raw: bytes, charset: str | None, *, errors: str = "strict") -> str:
    """Decode a response body with its declared charset, UTF-8 when absent or unknown."""
    try:
        return raw.decode(charset or "utf-8", errors)
    except LookupError:
        return raw.decode("utf-8", errors)


def _log_failure(method: str, path: str, status: int, text: str) -> None:
    if status == 401:
        _logger.warning("Unauthorized: %s %s (check the configured token)", method, path)
    elif status == 404:
        _logger.warning("Not found: %s %s", method, path)
    elif status >= 500:
        _logger.warning("Server error %s: %s %s", status, method, path)
    else:
        _logger.warning("Error %s from %s %s: %s", status, method, path, text[:200])


class AiohttpHttpClient:
    """JSON-over-HTTP client bound to the configured base URL.

    Injects ``Authorization: Bearer <token>`` when a token is configured.
    The ``aiohttp.ClientSession`` is owned by the caller.
    """

    def __init__(self, config: TaskSyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": self._config.user_agent,
        }
        if self._config.token:
            headers["authorization"] = f"Bearer {self._config.token}"
        return headers

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any) -> Any:
        return await self.request("POST", path, body=json)

    async def put(self, path: str, json: Any) -> Any:
        return await self.request("PUT", path, body=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def request(self, method: str, path: str, *, body: Any = None) -> Any:
        """Send one request and decode the JSON response.

        1. Serialize *body* (if any) as JSON
        2. Send with the default headers
        3. Map non-2xx statuses and network failures to ``TaskTransportError``
        4. Decode the body; an empty body decodes to ``None``
        """
        url = f"{self._config.base_url}{path}"
        headers = self._headers()
        data = json.dumps(body) if body is not None else None

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled:
            _logger.debug(
                "Request trace %s %s headers=%s body=%s",
                method,
                path,
                redact_headers(headers),
                truncate_for_log(body),
            )

        try:
            async with self._http.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                raw = await resp.read()
                status = resp.status
                charset = resp.charset
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            reason = str(exc) or type(exc).__name__
            _logger.warning("No response from %s %s: %s", method, url, reason)
            raise TaskTransportError(
                f"{method} {path} failed: {reason}",
                method=method,
                path=path,
            ) from exc

        _logger.debug("Response %s %s %s", status, method, path)

        if not 200 <= status < 300:
            text = _decode_body(raw, charset, errors="replace")
            _log_failure(method, path, status, text)
            raise TaskTransportError(
                f"HTTP {status} from {method} {path}: {text[:200]}",
                status_code=status,
                method=method,
                path=path,
            )

        try:
            text = _decode_body(raw, charset)
        except UnicodeDecodeError as exc:
            raise TaskTransportError(
                f"Invalid response body from {method} {path}: {exc}",
                status_code=status,
                method=method,
                path=path,
            ) from exc

        if not text.strip():
            return None

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TaskTransportError(
                f"Invalid JSON from {method} {path}: {text[:200]}",
                status_code=status,
                method=method,
                path=path,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response trace %s %s body=%s", method, path, truncate_for_log(result))
        return result
