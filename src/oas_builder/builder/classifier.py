"""Parameter location resolution and route template helpers."""

import re

from oas_builder.catalog.base import InputDescriptor

LOCATIONS = ("query", "header", "path", "cookie")

# ":name" optionally followed by a regex constraint, e.g. ":id(^\d+$)"
_PATH_VARIABLE = re.compile(r"^:([^(/]+)(\(.*\))?$")


def classify(
    input_name: str,
    descriptor: InputDescriptor,
    action_location: str | None,
    route: str,
) -> str | None:
    """Resolve where an input travels.

    Precedence: the input's own location, the action's default location,
    then a matching path variable in the route. Returns None when none of
    these apply; callers treat that as a request body candidate.
    """
    for location in (descriptor.location, action_location):
        if location in LOCATIONS:
            return location

    if input_name in path_variables(route):
        return "path"

    return None


def path_variables(route: str) -> list[str]:
    """Names of the ``:name`` segments of a route template."""
    names = []
    for segment in route.split("/"):
        match = _PATH_VARIABLE.match(segment)
        if match:
            names.append(match.group(1))
    return names


def to_openapi_path(route: str) -> str:
    """Rewrite ``/users/:id`` as ``/users/{id}``."""
    segments = []
    for segment in route.split("/"):
        match = _PATH_VARIABLE.match(segment)
        segments.append("{" + match.group(1) + "}" if match else segment)
    return "/".join(segments)
