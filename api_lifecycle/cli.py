"""
CLI for API version lifecycle management

Commands:
    validate        - Load the versioning configuration and check its invariants
    list            - Show versions in documentation order (newest first)
    export-openapi  - Build every version's document and write {name}.json files

Usage:
    api-lifecycle validate --config config/versions.yaml
    api-lifecycle list --config config/versions.yaml
    api-lifecycle export-openapi --config config/versions.yaml -o build/openapi \\
        --contracts myservice.api.v1 --contracts myservice.api.v2
"""

import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import configure_logging, load_versioning_config
from .openapi.document import build_documents
from .versioning.registry import ConfigurationError, VersionRegistry


logger = logging.getLogger('api.cli')


def _load_registry(config_path: Optional[str]) -> VersionRegistry:
    return VersionRegistry.from_mapping(load_versioning_config(config_path))


@click.group()
@click.version_option(version="1.0.0", prog_name="api-lifecycle")
@click.option("--log-level", default="WARNING", help="Logging level.")
def cli(log_level):
    """API version lifecycle and contract document tooling."""
    configure_logging(log_level.upper())


@cli.command("validate")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Versioning config file (default: API_VERSIONING_CONFIG).")
def validate(config_path):
    """Check the versioning configuration; exit 1 if it is invalid."""
    try:
        registry = _load_registry(config_path)
    except ConfigurationError as e:
        click.secho(f"Invalid configuration: {e}", fg="red", err=True)
        sys.exit(1)

    default_name = registry.default_version().name
    for version in registry.versions:
        marker = " (default)" if version.name == default_name else ""
        click.echo(f"  {version.name:<8} {version.semantic_version:<10} {version.status.value}{marker}")
    click.secho(f"OK: {len(registry)} version(s)", fg="green")


@cli.command("list")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Versioning config file (default: API_VERSIONING_CONFIG).")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def list_versions(config_path, output_json):
    """Show versions newest first."""
    try:
        registry = _load_registry(config_path)
    except ConfigurationError as e:
        click.secho(f"Invalid configuration: {e}", fg="red", err=True)
        sys.exit(1)

    if output_json:
        by_name = {entry["name"]: entry for entry in registry.summary()}
        click.echo(json.dumps([by_name[v.name] for v in registry.documents_listing()], indent=2))
        return

    for version in registry.documents_listing():
        click.echo(f"{version.name}\t{version.semantic_version}\t{version.status.value}")


@cli.command("export-openapi")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Versioning config file (default: API_VERSIONING_CONFIG).")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path),
              help="Output directory for {name}.json documents.")
@click.option("--contracts", "modules", multiple=True,
              help="Module that registers contracts/rules on import (repeatable).")
def export_openapi(config_path, output, modules):
    """Build every version's document and write it to OUTPUT."""
    try:
        registry = _load_registry(config_path)
    except ConfigurationError as e:
        click.secho(f"Invalid configuration: {e}", fg="red", err=True)
        sys.exit(1)

    for module in modules:
        importlib.import_module(module)
        logger.info(f"Imported contract module {module}")

    catalog = build_documents(registry)

    output.mkdir(parents=True, exist_ok=True)
    for version in catalog.listing():
        file_path = output / f"{version.name}.json"
        file_path.write_text(json.dumps(catalog[version.name], indent=2, default=str), encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Exported {len(catalog)} document(s) to {output}")


def main():
    cli()


if __name__ == "__main__":
    main()
