"""Document assembly, the entry point of a build pass."""

import copy
import logging
from pathlib import Path
from typing import Any

from oas_builder.catalog.base import HostSnapshot
from oas_builder.writer import write_document

from .components import ComponentRegistry
from .operation import OperationAssembler
from .paths import PathEnumerator
from .sections import build_info, build_security, build_servers, build_tags

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.1"


class DocumentBuilder:
    """Builds the OpenAPI document for a host snapshot.

    Each call to ``build`` starts from an empty document and a fresh
    component registry, so repeated builds of the same snapshot are
    identical.
    """

    def __init__(self, snapshot: HostSnapshot):
        self.snapshot = snapshot
        self.registry = ComponentRegistry()
        self._document: dict[str, Any] = {}

    def build(self) -> dict[str, Any]:
        self.registry.reset()
        config = self.snapshot.config
        oas = config.oas

        document: dict[str, Any] = {"openapi": OPENAPI_VERSION}
        document["info"] = build_info(config, self.snapshot.package)
        servers = build_servers(config)
        if servers:
            document["servers"] = servers
        document["security"] = build_security(oas, self.registry)

        assembler = OperationAssembler(
            self.registry,
            security=document["security"],
            group_by_version_tag=oas.group_by_version_tag,
        )
        document["paths"] = PathEnumerator(self.snapshot, assembler).enumerate()

        tags = build_tags(self.snapshot)
        if tags:
            document["tags"] = tags
        if oas.api_documentation:
            document["externalDocs"] = copy.deepcopy(oas.api_documentation)
        if self.registry.components:
            document["components"] = self.registry.components

        self._document = document
        logger.info(
            "Built OpenAPI document: %d paths, %d components",
            len(document["paths"]),
            len(self.registry),
        )
        return self.document

    @property
    def document(self) -> dict[str, Any]:
        """Copy of the last built document (empty before the first build)."""
        return copy.deepcopy(self._document)

    def write(self) -> Path | None:
        """Persist the last built document to the configured public location."""
        return write_document(self._document, self.snapshot.config)
