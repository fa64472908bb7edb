"""Convert locally defined tool descriptors into MCP tool definitions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from openclaw_mcp.types import ToolDefinition, ToolLike

# JSON-Schema keywords allowed through on a property fragment.
SCHEMA_FIELDS: frozenset[str] = frozenset([
    "$ref",
    "additionalProperties",
    "allOf",
    "anyOf",
    "const",
    "default",
    "description",
    "enum",
    "examples",
    "exclusiveMaximum",
    "exclusiveMinimum",
    "format",
    "items",
    "maxItems",
    "maxLength",
    "maximum",
    "minItems",
    "minLength",
    "minimum",
    "multipleOf",
    "not",
    "nullable",
    "oneOf",
    "pattern",
    "prefixItems",
    "properties",
    "required",
    "title",
    "type",
    "uniqueItems",
])

# Top-level definition tables that "$ref" pointers resolve against.
DEFS_KEYS: tuple[str, ...] = ("$defs", "definitions")

_SCALARS = (str, int, float, bool, type(None))
_DROP = object()


def _plain(value: Any) -> Any:
    """Reduce a value to plain JSON data, dropping anything that isn't."""
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Mapping):
        out = {}
        for k, v in value.items():
            if not isinstance(k, str):
                continue
            cleaned = _plain(v)
            if cleaned is not _DROP:
                out[k] = cleaned
        return out
    if isinstance(value, (list, tuple)):
        return [v for v in (_plain(item) for item in value) if v is not _DROP]
    return _DROP


def _clean_property(prop: Any) -> dict[str, Any]:
    if not isinstance(prop, Mapping):
        return {}
    clean: dict[str, Any] = {}
    for key, value in prop.items():
        if not isinstance(key, str):
            continue
        if key not in SCHEMA_FIELDS and not key.startswith("x-"):
            continue
        plain = _plain(value)
        if plain is not _DROP:
            clean[key] = plain
    return clean


def _schema_mapping(parameters: Any) -> Mapping[str, Any] | None:
    # pydantic models describe themselves via model_json_schema()
    if hasattr(parameters, "model_json_schema"):
        return parameters.model_json_schema()
    if isinstance(parameters, Mapping):
        return parameters
    return None


def convert_tool_to_mcp(tool: ToolLike) -> ToolDefinition:
    """
    Project a tool descriptor down to a plain MCP ToolDefinition.

    Each property is copied field by field, keeping only JSON-Schema keywords
    with plain-data values, so markers attached by whatever library built the
    schema never reach the protocol boundary. ``required`` is taken as-is when
    it is a list and treated as empty otherwise. Definition tables (``$defs``)
    travel along so nested ``$ref`` pointers still resolve. No validation is
    performed.
    """
    json_schema: dict[str, Any] = {"type": "object", "properties": {}, "required": []}

    schema = _schema_mapping(getattr(tool, "parameters", None))
    if schema is not None and "properties" in schema:
        properties = schema.get("properties") or {}
        if isinstance(properties, Mapping):
            for key, prop in properties.items():
                if isinstance(key, str):
                    json_schema["properties"][key] = _clean_property(prop)
        required = schema.get("required")
        if isinstance(required, list):
            json_schema["required"] = list(required)

        # nested models are referenced as "#/$defs/<Name>"; keep the targets
        for defs_key in DEFS_KEYS:
            defs = schema.get(defs_key)
            if isinstance(defs, Mapping) and defs:
                json_schema[defs_key] = {
                    name: _clean_property(fragment)
                    for name, fragment in defs.items()
                    if isinstance(name, str)
                }

    return ToolDefinition(
        name=tool.name,
        description=getattr(tool, "description", None) or "",
        input_schema=json_schema,
    )


__all__ = ["SCHEMA_FIELDS", "convert_tool_to_mcp"]
