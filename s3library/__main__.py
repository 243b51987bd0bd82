"""CLI entry point for the scoped storage client.

This module provides a command-line interface over StorageClient. The
connection is configured through ``S3_LIBRARY_*`` environment variables
or a ``.env`` file.

Usage:
    # List the items of a reference id
    python -m s3library list <reference_id>

    # Upload a file as an item
    python -m s3library push <reference_id> <key> <file>

    # Download an item
    python -m s3library get <reference_id> <key> --output <file>

    # Delete an item
    python -m s3library delete <reference_id> <key>

Examples:
    python -m s3library push test:01 test ./data.txt
    python -m s3library list test:01
"""

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from loguru import logger
from pydantic import ValidationError

from s3library import __version__
from s3library.core.config import StorageSettings
from s3library.storage.exceptions import StorageClientError
from s3library.storage.storage_client import StorageClient


def _build_client() -> StorageClient:
    """Load settings, configure logging and create the client."""
    try:
        settings = StorageSettings()
    except ValidationError as e:
        _fail(e)

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    return StorageClient.from_settings(settings)


def _fail(error: Exception) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
def cli() -> None:
    """Reference-scoped access to an S3-compatible bucket."""
    pass


@cli.command("list")
@click.argument("reference_id")
def list_items(reference_id: str) -> None:
    """List the items stored under a reference id.

    Prints one key per line, relative to the reference id.

    Example:
        python -m s3library list test:01
    """
    try:
        client = _build_client()
        for key in client.list_items(reference_id):
            click.echo(key)
    except StorageClientError as e:
        _fail(e)


@cli.command("push")
@click.argument("reference_id")
@click.argument("key")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def push_item(reference_id: str, key: str, file: Path) -> None:
    """Upload FILE as item KEY of a reference id.

    An existing item with the same key is overwritten.
    """
    try:
        client = _build_client()
        composed_key = client.push_item(reference_id, key, file.read_bytes())
        click.echo(composed_key)
    except StorageClientError as e:
        _fail(e)


@cli.command("get")
@click.argument("reference_id")
@click.argument("key")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="File to write the item to (default: stdout)",
)
def get_item(reference_id: str, key: str, output: Optional[Path]) -> None:
    """Download item KEY of a reference id."""
    try:
        client = _build_client()
        data = client.get_item(reference_id, key)
    except StorageClientError as e:
        _fail(e)

    if output is None:
        click.echo(data, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)


@cli.command("delete")
@click.argument("reference_id")
@click.argument("key")
def delete_item(reference_id: str, key: str) -> None:
    """Delete item KEY of a reference id.

    Exits with status 1 if there is no such item.
    """
    try:
        client = _build_client()
        result = client.delete_item(reference_id, key)
    except StorageClientError as e:
        _fail(e)

    if not result:
        click.echo(f"The item you want to delete ({key}) does not exist.", err=True)
        sys.exit(1)


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"s3library v{__version__}")


if __name__ == "__main__":
    cli()
