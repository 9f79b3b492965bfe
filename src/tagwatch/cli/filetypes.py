"""tagwatch filetypes command - show what ctags will be asked to index."""

from pathlib import Path

import click

from tagwatch.cli.utils import discover_filetypes, load_settings


@click.command()
def filetypes_command() -> None:
    """List the file name patterns reported by ctags.

    Changed files matching none of these never trigger an update.
    """
    config = load_settings(Path.cwd())
    registry = discover_filetypes(config.tags)
    for token in registry.tokens():
        click.echo(token)
