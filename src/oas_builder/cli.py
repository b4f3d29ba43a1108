"""CLI entry point for oas-builder."""

import logging
from importlib.metadata import PackageNotFoundError
from pathlib import Path

import click
import yaml

from oas_builder.builder.document import DocumentBuilder
from oas_builder.catalog.loader import SnapshotError, load_snapshot
from oas_builder.config import PackageMetadata
from oas_builder.validator import validate_document
from oas_builder.writer import dump_document


def _load_package(dist_name: str | None) -> PackageMetadata | None:
    if dist_name is None:
        return None
    try:
        return PackageMetadata.from_distribution(dist_name)
    except PackageNotFoundError:
        raise click.ClickException(f"Distribution not installed: {dist_name}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """OAS Builder: compile an action/route registry into an OpenAPI document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("snapshot_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file. Defaults to the configured public location.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format when writing to --output.")
@click.option("--package", "dist_name", default=None, help="Read package metadata from this installed distribution.")
def build(snapshot_path: Path, output: Path | None, fmt: str, dist_name: str | None):
    """Build the OpenAPI document for a host snapshot."""
    click.echo(f"Loading {snapshot_path}...")
    try:
        snapshot = load_snapshot(snapshot_path, package=_load_package(dist_name))
    except SnapshotError as e:
        raise click.ClickException(str(e))
    click.echo(f"Found {sum(1 for _ in snapshot.iter_actions())} actions.")

    builder = DocumentBuilder(snapshot)
    document = builder.build()
    click.echo(f"Built {len(document['paths'])} paths.")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(dump_document(document, fmt) + "\n", encoding="utf-8")
        click.echo(f"Document saved to {output}")
        return

    written = builder.write()
    if written is None:
        click.echo("Document was not written, see warnings above.")
    else:
        click.echo(f"Document saved to {written}")


@main.command()
@click.argument("document_path", type=click.Path(exists=True, path_type=Path))
def check(document_path: Path):
    """Check references and structure of an OpenAPI document."""
    try:
        document = yaml.safe_load(document_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse {document_path}: {e}")
    if not isinstance(document, dict):
        raise click.ClickException(f"{document_path} is not an OpenAPI document")

    errors = validate_document(document)
    if not errors:
        click.echo("OK")
        return

    for location, message in errors.items():
        click.echo(f"  {location}: {message}")
    raise click.ClickException(f"{len(errors)} problems found")
