"""umlseed parse command - extract the SQL schema from a project archive."""

from pathlib import Path

import click

from umlseed.cli.show import echo_json, print_collection
from umlseed.cli.utils import cli_errors, get_store
from umlseed.core.errors import ArchiveError
from umlseed.core.logging import run_context
from umlseed.core.progress import pluralize, spinner, status
from umlseed.project import PROJECT_EXTENSION, can_parse, extract_collection


@click.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--script",
    default=0,
    show_default=True,
    type=click.IntRange(min=0),
    help="DDL script index",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def parse_command(ctx: click.Context, archive: Path, script: int, as_json: bool) -> None:
    """Extract tables from ARCHIVE and store them as the current project.

    ARCHIVE is a MagicDraw project file (*.mdzip).
    """
    store = get_store(ctx)
    with run_context(), cli_errors():
        if not can_parse(archive.name):
            raise ArchiveError.unsupported_file(archive.name, PROJECT_EXTENSION)
        with spinner(f"Reading {archive.name}"):
            collection = extract_collection(archive, script=script)
        store.save(collection)

    if as_json:
        echo_json(collection)
        return
    print_collection(collection)
    tables = pluralize(len(collection.tables), "table")
    status(f"Stored {tables} from {archive.name}", style="success")
