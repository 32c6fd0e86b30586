"""umlseed CLI - umlseed command."""

from pathlib import Path

import click

from umlseed.cli.clear import clear_command
from umlseed.cli.generate import generate_command
from umlseed.cli.parse import parse_command
from umlseed.cli.show import show_command
from umlseed.cli.utils import cli_errors
from umlseed.config.loader import load_config
from umlseed.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="umlseed")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (merged over ~/.config/umlseed/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """umlseed - SQL schemas and fake INSERT data from MagicDraw projects."""
    ctx.ensure_object(dict)
    with cli_errors():
        config = load_config(config_path)
    if verbose:
        config.logging.level = "DEBUG"
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    configure_logging(config=config.logging)


cli.add_command(parse_command, name="parse")
cli.add_command(show_command, name="show")
cli.add_command(generate_command, name="generate")
cli.add_command(clear_command, name="clear")


if __name__ == "__main__":
    cli()
