"""Host snapshot loader.

Reads a YAML or JSON file describing actions, routes, configuration and
package metadata into a HostSnapshot.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from oas_builder.config import PackageMetadata, ServerConfig

from .base import DEFAULT_VERBS, ActionDescriptor, HostSnapshot, RouteBinding

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot file cannot be turned into a HostSnapshot."""


def load_snapshot(file_path: Path, package: PackageMetadata | None = None) -> HostSnapshot:
    """Parse a snapshot file. ``package`` overrides the file's package section."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SnapshotError(f"{file_path}: {e}") from e

    return snapshot_from_dict(data or {}, package=package)


def snapshot_from_dict(data: Any, package: PackageMetadata | None = None) -> HostSnapshot:
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a mapping")

    try:
        config = ServerConfig(**(data.get("server") or {}))
        if package is None:
            package = PackageMetadata(**(data.get("package") or {}))
        routes = _parse_routes(data.get("routes") or {})
    except ValidationError as e:
        raise SnapshotError(str(e)) from e

    return HostSnapshot(
        actions=_parse_actions(data.get("actions") or {}),
        routes=routes,
        verbs=_parse_verbs(data.get("verbs") or DEFAULT_VERBS),
        config=config,
        package=package,
    )


def _parse_actions(actions: dict) -> dict[str, dict[str, ActionDescriptor]]:
    if not isinstance(actions, dict):
        raise SnapshotError("'actions' must map action names to versions")

    result: dict[str, dict[str, ActionDescriptor]] = {}
    for name, versions in actions.items():
        if not isinstance(versions, dict):
            logger.warning("Skipping action %s: expected a mapping of versions", name)
            continue
        for version, body in versions.items():
            action = _parse_action(str(name), version, body)
            if action is not None:
                result.setdefault(str(name), {})[str(version)] = action
    return result


def _parse_action(name: str, version: Any, body: Any) -> ActionDescriptor | None:
    if not isinstance(body, dict):
        logger.warning("Skipping action %s@%s: expected a mapping", name, version)
        return None

    fields = {"name": name, "version": version, **body}
    try:
        return ActionDescriptor(**fields)
    except ValidationError as e:
        logger.warning("Skipping malformed action %s@%s: %s", name, version, e)
        return None


def _parse_routes(routes: dict) -> dict[str, list[RouteBinding]]:
    if not isinstance(routes, dict):
        raise SnapshotError("'routes' must map verbs to route lists")

    result: dict[str, list[RouteBinding]] = {}
    for verb, bindings in routes.items():
        if not isinstance(verb, str):
            raise SnapshotError(f"Route verb must be a string, got {verb!r}")
        if bindings is not None and not isinstance(bindings, list):
            raise SnapshotError(f"Routes for {verb} must be a list")
        for binding in bindings or []:
            if not isinstance(binding, dict):
                raise SnapshotError(f"Route for {verb} must be a mapping, got {binding!r}")
        result[verb.lower()] = [RouteBinding(**binding) for binding in bindings or []]
    return result


def _parse_verbs(verbs: Any) -> list[str]:
    if not isinstance(verbs, list) or not all(isinstance(v, str) for v in verbs):
        raise SnapshotError("'verbs' must be a list of strings")
    return [v.lower() for v in verbs]
