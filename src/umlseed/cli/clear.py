"""umlseed clear command - forget the stored project."""

import click
import questionary

from umlseed.cli.utils import cli_errors, get_store
from umlseed.core.progress import status


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def clear_command(ctx: click.Context, yes: bool) -> None:
    """Delete the stored table collection."""
    store = get_store(ctx)

    if not yes:
        answer = questionary.confirm(
            f"Remove the stored project from {store.path}?",
            default=False,
        ).ask()
        if not answer:
            status("[dim]Cancelled[/dim]", style="none")
            return

    with cli_errors():
        cleared = store.clear()
    if cleared:
        status("Stored project removed", style="success")
    else:
        status("Nothing to clear", style="warning")
