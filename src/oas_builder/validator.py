"""Structural checks for built OpenAPI documents."""

import re
from typing import Any

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

_TEMPLATE_VARIABLE = re.compile(r"\{([^}]+)\}")


def validate_references(document: dict[str, Any]) -> dict[str, str]:
    """Check that every ``$ref`` resolves inside the document.

    Returns dict of {location: error_message} for dangling references.
    """
    errors = {}
    for location, ref in _iter_refs(document, "#"):
        if _resolve(document, ref) is None:
            errors[location] = f"Unresolved reference: {ref}"
    return errors


def validate_structure(document: dict[str, Any]) -> dict[str, str]:
    """Check required keys, responses and path parameters.

    Returns dict of {location: error_message}.
    """
    errors = {}
    for key in ("openapi", "info", "paths"):
        if key not in document:
            errors[f"#/{key}"] = "Missing required field"

    info = document.get("info", {})
    for key in ("title", "version"):
        if "info" in document and not info.get(key):
            errors[f"#/info/{key}"] = "Missing required field"

    for path, path_item in document.get("paths", {}).items():
        variables = set(_TEMPLATE_VARIABLE.findall(path))
        for method, operation in path_item.items():
            if method not in HTTP_METHODS:
                continue
            location = f"#/paths/{_escape(path)}/{method}"
            if not operation.get("responses"):
                errors[location] = "Operation has no responses"
                continue
            declared = {
                p.get("name")
                for p in _parameters(document, operation)
                if p.get("in") == "path"
            }
            missing = variables - declared
            if missing:
                errors[location] = f"Path variables without parameters: {', '.join(sorted(missing))}"
    return errors


def validate_document(document: dict[str, Any]) -> dict[str, str]:
    """Run all checks on a document.

    Returns dict of {location: error_message} for all problems found.
    """
    errors = {}
    errors.update(validate_structure(document))
    errors.update(validate_references(document))
    return errors


def _iter_refs(node: Any, location: str):
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield location, ref
        for key, value in node.items():
            yield from _iter_refs(value, f"{location}/{_escape(str(key))}")
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from _iter_refs(value, f"{location}/{index}")


def _resolve(document: dict[str, Any], ref: str) -> Any:
    """Follow a local JSON pointer, None when it does not resolve."""
    if not ref.startswith("#/"):
        return None
    node: Any = document
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _parameters(document: dict[str, Any], operation: dict[str, Any]) -> list[dict[str, Any]]:
    resolved = []
    for parameter in operation.get("parameters", []):
        if "$ref" in parameter:
            parameter = _resolve(document, parameter["$ref"]) or {}
        resolved.append(parameter)
    return resolved


def _escape(part: str) -> str:
    return part.replace("~", "~0").replace("/", "~1")
