"""Pydantic request models for store entrypoints.

These are the bodies sent to the backend. UI callers build them, which is
where user input is validated; the store sends them as-is.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class TaskDraft(BaseModel):
    """Body of ``POST /tasks/``."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    title: str
    description: str = ""
    completed: bool = False

    @field_validator("title")
    @classmethod
    def _title_non_empty(cls, value: str) -> str:
        title = value.strip()
        if not title:
            raise ValueError("title must be non-empty")
        return title

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class TaskPatch(BaseModel):
    """Body of ``PUT /tasks/{id}``: exactly the three updatable fields."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    title: str
    description: str = ""
    completed: bool

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", include={"title", "description", "completed"})
