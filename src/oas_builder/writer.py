"""Persistence and rendering of built documents."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from oas_builder.config import ServerConfig

logger = logging.getLogger(__name__)


def dump_document(document: dict[str, Any], fmt: str = "json") -> str:
    """Render a document as JSON (2-space indent) or YAML text."""
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False)


def write_document(document: dict[str, Any], config: ServerConfig) -> Path | None:
    """Write the document below the first public path.

    Returns the written file, or None when the write was skipped or failed.
    Failures are logged, never raised.
    """
    if not config.public_paths:
        logger.warning("No public directory found to write OpenAPI document")
        return None

    if not document:
        logger.warning("OpenAPI document is empty")
        return None

    oas = config.oas
    if not (oas.document_path and oas.document_name):
        logger.warning("No path or name defined to write OpenAPI document")
        return None

    directory = Path(config.public_paths[0]) / oas.document_path.lstrip("/")
    target = directory / f"{oas.document_name}.json"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        target.write_text(dump_document(document), encoding="utf-8")
    except OSError:
        logger.warning("Cannot write OpenAPI document to %s", target, exc_info=True)
        return None

    logger.info("OpenAPI document written to %s", target)
    return target
