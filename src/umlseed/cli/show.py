"""umlseed show command - print the stored table collection."""

import json

import click
from rich.table import Table

from umlseed.cli.utils import get_store, require_collection
from umlseed.core.progress import get_console
from umlseed.project.models import OneOf, SQLColumn, SQLTableCollection


def _describe_check(column: SQLColumn) -> str:
    check = column.check_constraint
    if check is None:
        return ""
    if isinstance(check, OneOf):
        return "in (" + ", ".join(check.options) + ")"
    return check.body


def _describe_key(column: SQLColumn) -> str:
    parts = []
    if column.primary_key:
        parts.append("PK")
    if column.foreign_key is not None:
        parts.append(f"FK → {column.foreign_key[0]}.{column.foreign_key[1]}")
    return ", ".join(parts)


def print_collection(collection: SQLTableCollection) -> None:
    """Render one rich table per SQL table on stderr."""
    console = get_console()
    if not collection.tables:
        console.print("[yellow]No tables[/yellow]")
        return
    for table in collection.tables:
        grid = Table(title=f"[bold]{table.name}[/bold]", title_justify="left")
        grid.add_column("Column", style="cyan")
        grid.add_column("Type")
        grid.add_column("Key")
        grid.add_column("Null")
        grid.add_column("Check", style="dim")
        for column in table.columns:
            grid.add_row(
                column.name,
                str(column.sql_type),
                _describe_key(column),
                "yes" if column.nullable else "",
                _describe_check(column),
            )
        console.print(grid)


def echo_json(collection: SQLTableCollection) -> None:
    click.echo(json.dumps(collection.model_dump(mode="json"), indent=2))


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show_command(ctx: click.Context, as_json: bool) -> None:
    """Show the tables of the last parsed project."""
    collection = require_collection(get_store(ctx))
    if as_json:
        echo_json(collection)
    else:
        print_collection(collection)
