"""CLI utilities."""

from collections.abc import Iterator
from contextlib import contextmanager

import click

from umlseed.config.models import UmlSeedConfig
from umlseed.core.errors import UmlSeedError
from umlseed.core.logging import get_log_file_path
from umlseed.project.models import SQLTableCollection
from umlseed.store import CollectionStore


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report umlseed errors as click errors (exit code 1, no traceback)."""
    try:
        yield
    except UmlSeedError as e:
        message = str(e)
        if (log_file := get_log_file_path()) is not None:
            message += f"\nSee {log_file} for details"
        raise click.ClickException(message) from e


def get_config(ctx: click.Context) -> UmlSeedConfig:
    config: UmlSeedConfig = ctx.obj["config"]
    return config


def get_store(ctx: click.Context) -> CollectionStore:
    return CollectionStore(get_config(ctx).store.path)


def require_collection(store: CollectionStore) -> SQLTableCollection:
    """Load the stored collection.

    Raises:
        click.ClickException: If nothing has been parsed yet
    """
    with cli_errors():
        collection = store.load()
    if collection is None:
        raise click.ClickException("No project loaded. Run 'umlseed parse ARCHIVE' first.")
    return collection
