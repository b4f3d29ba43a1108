"""Data models for the host's action and route registry.

The loader converts its input into these models once, so the builder
works on validated descriptors instead of loosely-typed mappings.
"""

from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field

from oas_builder.config import PackageMetadata, ServerConfig

DEFAULT_VERBS = ["head", "get", "post", "patch", "put", "delete"]


class InputDescriptor(BaseModel):
    """A declared input of an action.

    Keys follow OpenAPI naming (``in``, ``schema``, ``allowEmptyValue``).
    Unknown keys such as ``format`` or ``enum`` are kept and copied into
    the generated schema.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    location: str | None = Field(default=None, alias="in")
    required: bool | None = None
    description: str | None = None
    example: Any = None
    style: str | None = None
    explode: bool | None = None
    allow_empty_value: bool | None = Field(default=None, alias="allowEmptyValue")
    # Shape is checked by the schema builder, a malformed subtree only loses its schema.
    nested: Any = Field(default=None, alias="schema")
    items: dict[str, Any] | None = None
    default: Any = None
    validator: Any = None
    formatter: Any = None

    def declaration(self) -> dict[str, Any]:
        """Return the descriptor as an OpenAPI-keyed mapping."""
        return self.model_dump(by_alias=True, exclude_none=True)


class HeaderDescriptor(BaseModel):
    """A request header an action expects."""

    model_config = ConfigDict(populate_by_name=True)

    description: str | None = None
    value_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    explode: bool | None = None
    style: str | None = None
    example: Any = None
    required: bool | None = None


class ActionDescriptor(BaseModel):
    """A named, versioned server-side operation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: int | float | str = 1
    summary: str | None = None
    description: str | None = None
    tags: list[str] = []
    deprecated: bool | None = None
    location: str | None = Field(default=None, alias="in")  # default for all inputs
    inputs: dict[str, InputDescriptor] = {}
    response_schemas: dict[str | int, Any] | None = None
    output_example: dict[str, Any] | None = None
    headers: dict[str, HeaderDescriptor] | None = None

    @property
    def operation_id(self) -> str:
        return f"{self.name}_{self.version}"


class RouteBinding(BaseModel):
    """A static (verb, path) -> action mapping."""

    path: str
    action: str
    api_version: int | float | str | None = None
    ignored: bool = False


class HostSnapshot(BaseModel):
    """Read-only view of everything the builder needs from the host."""

    model_config = ConfigDict(frozen=True)

    actions: dict[str, dict[str, ActionDescriptor]] = {}
    routes: dict[str, list[RouteBinding]] = {}
    verbs: list[str] = DEFAULT_VERBS
    config: ServerConfig = ServerConfig()
    package: PackageMetadata = PackageMetadata()

    def iter_actions(self) -> Iterator[ActionDescriptor]:
        """Yield every action of every version, in registry order."""
        for versions in self.actions.values():
            yield from versions.values()
