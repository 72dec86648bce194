"""Base model for task API responses.

Every response model inherits from :class:`TaskSyncBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys (``createdAt``)
  map automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``null`` values so the
  field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TaskSyncBaseModel(BaseModel):
    """Base for task API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``null`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}

        # Only auto-stash raw when not explicitly provided (i.e. model_validate
        # from an API dict).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
