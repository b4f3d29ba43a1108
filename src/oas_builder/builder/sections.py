"""Top-level document sections: info, servers, security and tags."""

import copy
import logging
import re
import socket
from typing import Any

from oas_builder.catalog.base import HostSnapshot
from oas_builder.config import OasConfig, PackageMetadata, ServerConfig

from .components import ComponentRegistry

logger = logging.getLogger(__name__)

DEFAULT_SECURITY_SCHEMES = {
    "ApiKeyAuth": {"type": "apiKey", "name": "Authorization", "in": "header"},
    "BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
}

# "Name <email> (url)", every part optional.
_AUTHOR = re.compile(r"^\s*([^<(]*?)\s*(?:<([^>]*)>)?\s*(?:\(([^)]*)\))?\s*$")


def build_info(config: ServerConfig, package: PackageMetadata) -> dict[str, Any]:
    info: dict[str, Any] = {"title": config.server_name or package.name}
    if package.description:
        info["description"] = package.description
    contact = build_contact(package.author)
    if contact:
        info["contact"] = contact
    if package.license:
        info["license"] = {"name": package.license}
    info["version"] = config.api_version or package.version
    return info


def build_contact(author: str | dict[str, str] | None) -> dict[str, str] | None:
    """Contact Object from a structured or free-text author."""
    if not author:
        return None
    if isinstance(author, dict):
        contact = {k: v for k, v in author.items() if k in ("name", "email", "url") and v}
    else:
        contact = parse_author(author)
    return contact or None


def parse_author(text: str) -> dict[str, str]:
    """Split ``"Jane Doe <jane@example.com> (https://example.com)"``."""
    match = _AUTHOR.match(text)
    if not match:
        return {"name": text.strip()}
    name, email, url = (part.strip() if part else "" for part in match.groups())
    contact = {}
    if name:
        contact["name"] = name
    if email:
        contact["email"] = email
    if url:
        contact["url"] = url
    return contact


def build_servers(config: ServerConfig) -> list[dict[str, Any]]:
    """Configured servers, or one synthesized from the web settings."""
    servers = config.oas.servers
    if _valid_servers(servers):
        return copy.deepcopy(servers)
    if servers is not None:
        logger.warning("Invalid servers configuration, synthesizing a server entry")

    web = config.web
    oas = config.oas
    scheme = "https" if web.secure else "http"
    base_url = oas.base_url
    if not base_url:
        host = oas.host_override or external_ip_address()
        port = oas.port_override or web.port
        base_url = f"{host}:{port}"
    base_path = web.url_path_for_actions or "api"
    return [{"url": f"{scheme}://{base_url}/{base_path}"}]


def _valid_servers(servers: Any) -> bool:
    if not isinstance(servers, list) or not servers:
        return False
    return all(isinstance(s, dict) and isinstance(s.get("url"), str) and s["url"] for s in servers)


def external_ip_address() -> str:
    """Best guess at the address other machines reach this host on."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            # UDP connect sends nothing, it only selects the outbound interface.
            sock.connect(("10.255.255.255", 1))
            return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"


def build_security(oas: OasConfig, registry: ComponentRegistry) -> list[dict[str, list[str]]]:
    """Security requirements, registering the schemes they name."""
    requirements = oas.security
    schemes = oas.security_schemes or {}

    if not _valid_security(requirements, schemes):
        if requirements is not None:
            logger.warning("Invalid security configuration, using default security schemes")
        schemes = DEFAULT_SECURITY_SCHEMES
        requirements = [{name: []} for name in DEFAULT_SECURITY_SCHEMES]

    for name, scheme in schemes.items():
        registry.resolve("securitySchemes", name, copy.deepcopy(scheme))
    return copy.deepcopy(requirements)


def _valid_security(requirements: Any, schemes: dict[str, Any]) -> bool:
    if not isinstance(requirements, list) or not requirements:
        return False
    for requirement in requirements:
        if not isinstance(requirement, dict):
            return False
        for name, scopes in requirement.items():
            if name not in schemes or not isinstance(scopes, list):
                return False
    return True


def build_tags(snapshot: HostSnapshot) -> list[dict[str, Any]] | None:
    """Version tags (when grouping by version) followed by configured tags."""
    oas = snapshot.config.oas
    tags_info = dict(oas.tags_info)
    tags: dict[str, dict[str, Any]] = {}

    if oas.group_by_version_tag:
        for action in snapshot.iter_actions():
            version = str(action.version)
            if version not in tags:
                tags[version] = _tag(version, tags_info.pop(version, None))

    for name, info in tags_info.items():
        if name not in tags:
            tags[name] = _tag(name, info)

    return list(tags.values()) or None


def _tag(name: str, info: dict[str, Any] | None) -> dict[str, Any]:
    tag: dict[str, Any] = {"name": str(name)}
    info = info or {}
    if info.get("description"):
        tag["description"] = info["description"]
    if info.get("externalDocs"):
        tag["externalDocs"] = copy.deepcopy(info["externalDocs"])
    return tag
