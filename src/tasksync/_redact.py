"""Helpers for request/response tracing.

The transport traces two kinds of values when ``api_trace_enabled`` is set:
request headers, which carry the bearer token, and decoded JSON bodies,
which can hold arbitrarily long task lists and descriptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
    }
)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy *headers* with credential-bearing values replaced."""
    return {
        key: "<redacted>" if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def truncate_for_log(body: Any, *, max_string: int = 200, max_items: int = 20) -> Any:
    """Shorten a decoded JSON body for logging.

    Long strings are cut at *max_string* characters and lists keep their
    first *max_items* entries plus a marker for the rest.
    """
    if isinstance(body, str):
        if len(body) > max_string:
            return f"{body[:max_string]}…<truncated>"
        return body
    if isinstance(body, dict):
        return {key: truncate_for_log(value, max_string=max_string, max_items=max_items) for key, value in body.items()}
    if isinstance(body, list):
        items = [truncate_for_log(item, max_string=max_string, max_items=max_items) for item in body[:max_items]]
        if len(body) > max_items:
            items.append(f"<{len(body) - max_items} more>")
        return items
    return body
