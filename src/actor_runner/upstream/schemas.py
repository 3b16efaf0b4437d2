"""Pydantic models for actor-platform payloads."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    """Closed set of input field types a schema property may declare."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class PassthroughModel(BaseModel):
    """Base model that keeps upstream keys it does not declare."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ActorSummary(BaseModel):
    """Read-only projection of one actor listing entry."""

    id: str | None = None
    name: str | None = None
    username: str | None = None
    description: str | None = None
    title: str | None = None
    is_public: bool | None = Field(default=None, alias="isPublic")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SchemaProperty(PassthroughModel):
    # Raw tag; unknown upstream types survive listing and fail at encoding.
    type: Any = None
    title: str | None = None
    description: str | None = None
    default: Any = None
    enum: list[Any] | None = None
    required: Any = None

    def field_type(self) -> FieldType | None:
        try:
            return FieldType(self.type)
        except (TypeError, ValueError):
            return None


class InputSchema(PassthroughModel):
    type: str = "object"
    properties: dict[str, SchemaProperty] = Field(default_factory=dict)
    required: Any = None


DEFAULT_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "startUrls": {
            "type": "array",
            "title": "Start URLs",
            "description": "List of URLs to crawl",
        }
    },
}


def default_input_schema() -> InputSchema:
    return InputSchema.model_validate(DEFAULT_INPUT_SCHEMA)
