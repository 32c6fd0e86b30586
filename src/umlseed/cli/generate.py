"""umlseed generate command - fake INSERT data for the stored project."""

import random
from pathlib import Path

import click

from umlseed.cli.utils import cli_errors, get_config, get_store, require_collection
from umlseed.core.logging import run_context
from umlseed.core.progress import pluralize, status
from umlseed.generate import generate_sql, load_overrides, table_guesses


@click.command()
@click.option(
    "--rows",
    type=click.IntRange(min=0),
    default=None,
    help="Rows per table [default: from config]",
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducible output")
@click.option(
    "--overrides",
    "overrides_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file of per-column strategies: {table: {column: {strategy: ...}}}",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write SQL to this file instead of stdout",
)
@click.pass_context
def generate_command(
    ctx: click.Context,
    rows: int | None,
    seed: int | None,
    overrides_path: Path | None,
    output_path: Path | None,
) -> None:
    """Generate INSERT statements for the last parsed project."""
    config = get_config(ctx).generation
    collection = require_collection(get_store(ctx))
    rows_per_table = config.rows_per_table if rows is None else rows
    if seed is None:
        seed = config.seed

    with run_context(), cli_errors():
        overrides = load_overrides(overrides_path) if overrides_path else None
        guesses = table_guesses(collection, overrides)
        sql = generate_sql(collection, guesses, rows_per_table, random.Random(seed))

    if output_path is None:
        click.echo(sql)
        return
    output_path.write_text(sql + "\n")
    tables = pluralize(len(collection.tables), "table")
    status(
        f"Wrote {pluralize(rows_per_table, 'row')} for {tables} to {output_path}",
        style="success",
    )
