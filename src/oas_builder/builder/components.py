"""Deduplicating store for reusable document components."""

from typing import Any


def reference(aspect: str, name: str) -> dict[str, str]:
    return {"$ref": f"#/components/{aspect}/{name}"}


class ComponentRegistry:
    """Components registered during one build, keyed by (aspect, name).

    The first value registered under a name is kept; later registrations
    only return a reference to it. Besides parameters and request bodies,
    the registry also holds the security schemes under ``securitySchemes``.
    """

    def __init__(self):
        self._components: dict[str, dict[str, Any]] = {}

    def resolve(self, aspect: str, name: str, component: Any = None) -> dict[str, str] | None:
        """Return a reference to ``aspect/name``, registering ``component`` if new.

        Without a component this is a lookup: None means nothing is registered.
        """
        registered = self._components.get(aspect, {})
        if name not in registered:
            if component is None:
                return None
            self._components.setdefault(aspect, {})[name] = component
        return reference(aspect, name)

    def get(self, aspect: str, name: str) -> Any:
        return self._components.get(aspect, {}).get(name)

    def reset(self) -> None:
        self._components = {}

    @property
    def components(self) -> dict[str, dict[str, Any]]:
        return self._components

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._components.values())
