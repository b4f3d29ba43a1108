"""Host configuration consumed by the document builder.

Defaults mirror the settings a host ships with, so an empty configuration
still produces a usable document.
"""

from importlib import metadata
from typing import Any

from pydantic import BaseModel


class WebConfig(BaseModel):
    """Settings of the HTTP server the document describes."""

    secure: bool = False
    port: int = 8080
    url_path_for_actions: str = "api"
    simple_routing: bool = True
    query_routing: bool = True


class OasConfig(BaseModel):
    """Settings of the OpenAPI document itself."""

    # Directory (below the first public path) and file name, without extension.
    document_path: str | None = "/"
    document_name: str | None = "openapi"
    # host:port the document points to; synthesized when unset.
    base_url: str | None = None
    ignore_routes: list[str] = []
    group_by_version_tag: bool = False
    host_override: str | None = None
    port_override: int | None = None
    api_documentation: dict[str, Any] | None = None
    tags_info: dict[str, dict[str, Any] | None] = {}
    # Validated when the document is built, invalid values fall back to defaults.
    servers: list[Any] | None = None
    security: list[Any] | None = None
    security_schemes: dict[str, dict[str, Any]] | None = None


class ServerConfig(BaseModel):
    """Top-level host configuration."""

    server_name: str | None = None
    api_version: str | None = None
    public_paths: list[str] = []
    web: WebConfig = WebConfig()
    oas: OasConfig = OasConfig()


class PackageMetadata(BaseModel):
    """Descriptor of the package that serves the API."""

    name: str = "api"
    version: str = "0.0.0"
    description: str | None = None
    license: str | None = None
    author: str | dict[str, str] | None = None

    @classmethod
    def from_distribution(cls, dist_name: str) -> "PackageMetadata":
        """Read metadata from an installed distribution."""
        meta = metadata.metadata(dist_name)
        author = meta.get("Author")
        author_email = meta.get("Author-email")
        if author_email and not author:
            # Author-email already carries "Name <email>" when a name was given.
            author = author_email
        elif author and author_email:
            author = f"{author} <{author_email}>"

        return cls(
            name=meta["Name"],
            version=meta["Version"],
            description=meta.get("Summary"),
            license=meta.get("License"),
            author=author,
        )
