"""Coerce raw form values into the JSON shapes an actor's input schema declares."""

from __future__ import annotations

import json
import math
from typing import Any, assert_never

from actor_runner.errors import ValidationError
from actor_runner.upstream.schemas import FieldType, InputSchema, SchemaProperty

_DROP = object()


def encode_inputs(schema: InputSchema, raw_inputs: dict[str, Any]) -> dict[str, Any]:
    """Return ``raw_inputs`` with every schema-declared field coerced to its type.

    Blank values for scalar and JSON fields are dropped so the actor falls back
    to its own defaults. Keys the schema does not declare pass through as-is.
    """
    encoded: dict[str, Any] = {}
    for key, value in raw_inputs.items():
        prop = schema.properties.get(key)
        if prop is None:
            encoded[key] = value
            continue
        coerced = _encode_field(key, prop, value)
        if coerced is not _DROP:
            encoded[key] = coerced
    return encoded


def _encode_field(key: str, prop: SchemaProperty, value: Any) -> Any:
    field_type = prop.field_type()
    if field_type is None:
        raise ValidationError(f'Unsupported field type {prop.type!r} for "{key}"')
    if value is None:
        return _DROP

    try:
        if field_type is FieldType.STRING:
            return _encode_string(value)
        if field_type is FieldType.NUMBER:
            return _encode_number(value, integer=False)
        if field_type is FieldType.INTEGER:
            return _encode_number(value, integer=True)
        if field_type is FieldType.BOOLEAN:
            return _encode_boolean(value)
        if field_type is FieldType.ARRAY:
            return _encode_json(value, list)
        if field_type is FieldType.OBJECT:
            return _encode_json(value, dict)
        assert_never(field_type)
    except (OverflowError, TypeError, ValueError) as exc:
        raise ValidationError(f'Invalid {field_type.value} format for "{key}": {exc}') from exc


def _encode_string(value: Any) -> Any:
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return value if value else _DROP


def _encode_number(value: Any, *, integer: bool) -> Any:
    if isinstance(value, bool):
        raise TypeError("expected a number, got a boolean")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return _DROP
        try:
            number: int | float = int(text)
        except ValueError:
            number = float(text)
    elif isinstance(value, (int, float)):
        number = value
    else:
        raise TypeError(f"expected a number, got {type(value).__name__}")
    if isinstance(number, float) and not math.isfinite(number):
        raise ValueError(f"{value!r} is not a finite number")

    if integer:
        if float(number) != int(number):
            raise ValueError(f"{value!r} is not a whole number")
        return int(number)
    return number


def _encode_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError(f"expected true or false, got {value!r}")


def _encode_json(value: Any, kind: type) -> Any:
    if isinstance(value, str):
        if not value.strip():
            return _DROP
        value = json.loads(value)
    if not isinstance(value, kind):
        expected = "an array" if kind is list else "an object"
        raise TypeError(f"expected {expected}, got {type(value).__name__}")
    return value
