"""Schema derivation from declared action inputs.

Turns a mapping of input declarations into an OpenAPI schema fragment:

    {"properties": {name: node, ...}, "required": [name, ...]}

Nodes for the request body carry their ``type`` inline (Media Type
Object). Nodes for parameters carry it under ``schema`` (Parameter Object).
"""

import copy
from collections.abc import Mapping
from typing import Any

from oas_builder.catalog.base import InputDescriptor

DEFAULT_TYPE = "string"

# Implementation-only keys that never reach the document.
STRIPPED_FIELDS = ("validator", "formatter")
# Keys that describe the transport of a parameter, not its value.
PARAMETER_FIELDS = ("in", "style", "explode", "allowEmptyValue")


class _MalformedInput(Exception):
    pass


def build_schema(
    inputs: Any,
    whitelist: list[str] | None = None,
    body: bool = False,
) -> dict[str, Any] | None:
    """Build the schema for ``inputs``.

    ``whitelist`` limits which top-level inputs are included. Returns None
    when ``inputs`` is not a mapping or any declaration in the tree is not
    a mapping.
    """
    if not isinstance(inputs, Mapping):
        return None
    try:
        return _build_level(inputs, whitelist, body)
    except _MalformedInput:
        return None


def _build_level(inputs: Mapping, whitelist: list[str] | None, body: bool) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, value in inputs.items():
        node = _declaration(value)
        if whitelist is not None and name not in whitelist:
            continue

        is_required = node.pop("required", None)
        nested = node.pop("schema", None)
        items = node.get("items")
        item_schema = items.get("schema") if isinstance(items, Mapping) else None

        if nested is not None or item_schema is not None:
            child_inputs = nested if nested is not None else item_schema
            if not isinstance(child_inputs, Mapping):
                raise _MalformedInput(name)
            child = _build_level(child_inputs, None, body)

            if node.get("type") == "array":
                node["items"] = {"type": "object", **child}
            else:
                node["type"] = "object"
                node.update(child)

        _compose(node, body)

        if isinstance(is_required, bool):
            if is_required:
                required.append(name)
        elif is_required is not None:
            node["required"] = is_required

        properties[name] = node

    level: dict[str, Any] = {"properties": properties}
    if required:
        level["required"] = required
    return level


def _declaration(value: Any) -> dict[str, Any]:
    """Detached, serializable copy of one input declaration."""
    if isinstance(value, InputDescriptor):
        value = value.declaration()
    elif not isinstance(value, Mapping):
        raise _MalformedInput(repr(value))

    node = {}
    for key, item in value.items():
        if key in STRIPPED_FIELDS or key in PARAMETER_FIELDS:
            continue
        if key == "default" and callable(item):
            continue
        node[key] = copy.deepcopy(item)
    return node


def _compose(node: dict[str, Any], body: bool) -> None:
    schema_type = node.get("type") or DEFAULT_TYPE

    if schema_type == "array" and not node.get("items"):
        node["items"] = {"type": DEFAULT_TYPE}

    if body:
        node["type"] = schema_type
    else:
        node.pop("type", None)
        node["schema"] = {"type": schema_type}


def infer_type(schema: Mapping) -> str:
    """Type of a built schema fragment, judged from its shape."""
    if "items" in schema:
        return "array"
    if "properties" in schema:
        return "object"
    return DEFAULT_TYPE
