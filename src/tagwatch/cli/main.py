"""tagwatch CLI - tagwatch command."""

import click

from tagwatch.cli.filetypes import filetypes_command
from tagwatch.cli.update import update_command
from tagwatch.cli.watch import watch_command
from tagwatch.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="tagwatch")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """tagwatch - keep ctags files current as source trees change."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(watch_command, name="watch")
cli.add_command(update_command, name="update")
cli.add_command(filetypes_command, name="filetypes")


if __name__ == "__main__":
    cli()
