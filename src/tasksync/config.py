"""Client configuration for tasksync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from tasksync._constants import BASE_URL, DEFAULT_TIMEOUT_S, USER_AGENT
from tasksync.exceptions import TaskSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise TaskSyncConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TaskSyncConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        API base URL, without the ``/tasks`` resource path. Trailing
        slashes are stripped.
    token : str or None
        Bearer token sent as ``Authorization`` header when set.
    timeout : float
        Total request timeout in seconds.
    api_trace_enabled : bool
        Log (redacted) request and response bodies at DEBUG level.
    user_agent : str
        ``User-Agent`` header value.
    """

    base_url: str = BASE_URL
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT_S
    api_trace_enabled: bool = False
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        base_url = self.base_url.strip().rstrip("/")
        if not base_url:
            raise TaskSyncConfigError("base_url must be non-empty")
        object.__setattr__(self, "base_url", base_url)
        if self.timeout <= 0:
            raise TaskSyncConfigError(f"timeout must be positive, got {self.timeout}")
        if self.token is not None and not self.token.strip():
            object.__setattr__(self, "token", None)

    @classmethod
    def from_env(cls, **overrides: Any) -> TaskSyncConfig:
        """Create configuration from environment variables.

        Reads ``TASKSYNC_BASE_URL``, ``TASKSYNC_TOKEN``,
        ``TASKSYNC_TIMEOUT`` and ``TASKSYNC_API_TRACE_ENABLED``.
        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("TASKSYNC_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        token = env.get("TASKSYNC_TOKEN")
        if token is not None:
            config_kwargs["token"] = token

        timeout_env = env.get("TASKSYNC_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            config_kwargs["timeout"] = _env_float("TASKSYNC_TIMEOUT", timeout_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("TASKSYNC_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
