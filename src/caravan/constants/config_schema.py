"""JSON Schema for ``caravan.yaml``."""

from __future__ import annotations

from typing import Any

STRING_LIST_SCHEMA: dict[str, Any] = {"type": "array", "items": {"type": "string"}}

FUNCTION_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "version": {"type": "string", "minLength": 1},
        "args": STRING_LIST_SCHEMA,
        "includeFiles": {"oneOf": [{"type": "string"}, STRING_LIST_SCHEMA]},
        "env": {
            "type": "object",
            "propertyNames": {"pattern": "^[A-Za-z_][A-Za-z0-9_]*$"},
            "additionalProperties": {"type": "string"},
        },
        "memory": {"type": "integer", "minimum": 128, "maximum": 3008},
        "maxDuration": {"type": "integer", "minimum": 1},
        "regions": STRING_LIST_SCHEMA,
    },
}

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "entrypoints": {**STRING_LIST_SCHEMA, "minItems": 1},
        "builder": {**STRING_LIST_SCHEMA, "minItems": 1},
        "execution_root": {"type": "string", "pattern": "^/"},
        "functions": {"type": "object", "additionalProperties": FUNCTION_CONFIG_SCHEMA},
    },
}
