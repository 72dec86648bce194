"""Normalization helpers.

Centralizes id reconciliation between the backend's ``id``/``_id`` fields
so the rest of the library only ever sees a canonical ``id``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tasksync.exceptions import TaskPayloadError

TaskId = str | int

_LEGACY_ID_KEY = "_id"


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def _unwrap_object_id(value: Any) -> Any:
    """Unwrap MongoDB extended JSON (``{"$oid": "..."}``) to its string form."""
    if isinstance(value, Mapping):
        oid = value.get("$oid")
        if isinstance(oid, str) and oid:
            return oid
    return value


def canonical_task_id(payload: Mapping[str, Any]) -> TaskId | None:
    """Return the canonical id of a task payload.

    ``id`` wins when present; ``_id`` is the fallback. Returns ``None`` when
    neither carries a usable value.
    """
    for key in ("id", _LEGACY_ID_KEY):
        value = _unwrap_object_id(payload.get(key))
        if not _is_present(value) or isinstance(value, bool):
            continue
        if isinstance(value, (str, int)):
            return value
        return str(value)
    return None


def normalize_task_payload(payload: Any, *, path: str = "") -> dict[str, Any]:
    """Return a copy of *payload* carrying only the canonical ``id`` field.

    Raises :class:`TaskPayloadError` when the payload is not a mapping or has
    no usable identifier.
    """
    if not isinstance(payload, Mapping):
        raise TaskPayloadError(
            f"Expected a task object, got {type(payload).__name__}",
            path=path,
        )
    task_id = canonical_task_id(payload)
    if task_id is None:
        raise TaskPayloadError("Task payload has neither 'id' nor '_id'", path=path)

    normalized = {key: value for key, value in payload.items() if key != _LEGACY_ID_KEY}
    normalized["id"] = task_id
    return normalized


def ensure_task_list(payload: Any, *, path: str = "") -> list[Any]:
    """Check that a collection response is a list; entries are normalized one by one later."""
    if not isinstance(payload, list):
        raise TaskPayloadError(
            f"Expected a list of tasks, got {type(payload).__name__}",
            path=path,
        )
    return payload


def same_task_id(left: TaskId, right: TaskId) -> bool:
    """Compare ids across their string and integer forms (``"7" == 7``)."""
    if left == right:
        return True
    return str(left) == str(right)
