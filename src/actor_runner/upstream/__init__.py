"""Upstream actor-platform access: HTTP client, payload models and input encoding."""

from actor_runner.upstream.client import ActorPlatformClient
from actor_runner.upstream.inputs import encode_inputs
from actor_runner.upstream.schemas import (
    DEFAULT_INPUT_SCHEMA,
    ActorSummary,
    FieldType,
    InputSchema,
    SchemaProperty,
)

__all__ = [
    "DEFAULT_INPUT_SCHEMA",
    "ActorPlatformClient",
    "ActorSummary",
    "FieldType",
    "InputSchema",
    "SchemaProperty",
    "encode_inputs",
]
