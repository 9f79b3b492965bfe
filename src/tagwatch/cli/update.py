"""tagwatch update command - run one batch for explicit paths."""

import asyncio
from pathlib import Path

import click

from tagwatch.cli.utils import discover_filetypes, load_settings
from tagwatch.core.paths import to_event_path
from tagwatch.core.progress import pluralize, status
from tagwatch.daemon.batch import Batch
from tagwatch.daemon.orchestrator import BatchOrchestrator
from tagwatch.tags.models import BatchOutcome


@click.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--dry-run", is_flag=True, help="Print the ctags command instead of running it")
def update_command(paths: tuple[Path, ...], dry_run: bool) -> None:
    """Update the tags files that own PATHS, as if they had just changed.

    Existing directories are treated as directory changes; everything else
    (including paths that no longer exist) as file changes.
    """
    config = load_settings(Path.cwd())
    registry = discover_filetypes(config.tags)
    orchestrator = BatchOrchestrator(registry=registry, tags=config.tags)

    events = [to_event_path(p.expanduser()) for p in paths]

    if dry_run:
        roots, command = orchestrator.plan(events)
        if command is None:
            status("No tags files affected", style="info")
            return
        status(f"Would update {pluralize(len(roots), 'project')}", style="info")
        click.echo(command)
        return

    result = asyncio.run(orchestrator.handle(Batch(paths=events)))

    if result.outcome == BatchOutcome.SKIPPED:
        status("No tags files affected", style="info")
    elif result.outcome == BatchOutcome.UPDATED:
        for marker_path in result.roots:
            status(marker_path, style="success")
    else:
        status(f"ctags failed: {result.error_detail}", style="error")
        raise SystemExit(1)
