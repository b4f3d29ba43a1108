"""Paths Object assembly across the host's routing strategies."""

import logging
from typing import Any

from oas_builder.catalog.base import ActionDescriptor, HostSnapshot, InputDescriptor

from .classifier import to_openapi_path
from .operation import OperationAssembler

logger = logging.getLogger(__name__)

WILDCARD_VERB = "all"

# Stands in for every action reachable through "/?action=name".
QUERY_ROUTING_ACTION = ActionDescriptor(
    name="genericActionForQueryRouting",
    version=1,
    location="query",
    inputs={
        "action": InputDescriptor(type="string", required=True),
        "apiVersion": InputDescriptor(type="string", required=False),
    },
)


class PathEnumerator:
    """Collects every reachable (path, verb) pair into a Paths Object.

    Strategies run in order: simple routing, query routing, explicit
    routes. A later entry for the same (path, verb) replaces an earlier one.
    """

    def __init__(self, snapshot: HostSnapshot, assembler: OperationAssembler):
        self.snapshot = snapshot
        self.assembler = assembler
        self.ignored = set(snapshot.config.oas.ignore_routes)

    def enumerate(self) -> dict[str, Any]:
        paths: dict[str, Any] = {}
        web = self.snapshot.config.web
        verbs = self.snapshot.verbs

        if web.simple_routing:
            for action in self.snapshot.iter_actions():
                self._add(paths, "/" + action.name, action, verbs)

        if web.query_routing:
            self._add(paths, "/", QUERY_ROUTING_ACTION, verbs)

        for verb, bindings in self.snapshot.routes.items():
            route_verbs = verbs if verb.lower() == WILDCARD_VERB else [verb.lower()]
            for binding in bindings:
                if binding.ignored:
                    continue
                versions = self.snapshot.actions.get(binding.action)
                if not versions:
                    logger.warning("Route %s %s points to unknown action %s", verb, binding.path, binding.action)
                    continue
                for action in versions.values():
                    if binding.api_version is not None and str(binding.api_version) != str(action.version):
                        continue
                    self._add(paths, binding.path, action, route_verbs)

        return paths

    def _add(self, paths: dict[str, Any], route: str, action: ActionDescriptor, verbs: list[str]) -> None:
        if route in self.ignored:
            logger.debug("Ignoring route %s", route)
            return

        key = to_openapi_path(route)
        for verb in verbs:
            try:
                operation = self.assembler.assemble(action, verb, route)
            except (TypeError, ValueError, KeyError, AttributeError) as e:
                logger.warning("Skipping %s %s (%s): %s", verb.upper(), route, action.operation_id, e)
                continue

            # Path items are only created once they hold an operation.
            path_item = paths.setdefault(key, {})
            if action.summary is not None:
                path_item["summary"] = action.summary
            if action.description is not None:
                path_item["description"] = action.description
            path_item[verb] = operation
