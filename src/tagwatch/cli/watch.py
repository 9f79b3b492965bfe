"""tagwatch watch command - keep tags files current until interrupted."""

import asyncio
from pathlib import Path

import click

from tagwatch.cli.utils import build_logging_config, discover_filetypes, find_root, load_settings
from tagwatch.core.progress import get_console, pluralize


def _print_banner(
    root: Path, delay: float, filetypes: int, tags_file: str, log_file: Path | None = None
) -> None:
    console = get_console()
    rule_line = "─" * 64

    console.print(rule_line, style="dim cyan", highlight=False)
    console.print("tagwatch · Watching".center(64), style="bold cyan", highlight=False)
    console.print(rule_line, style="dim cyan", highlight=False)
    console.print(f"  Root:        {root}", style="green", highlight=False)
    console.print(f"  Tags file:   {tags_file}", highlight=False)
    console.print(f"  Delay:       {delay:g}s", highlight=False)
    console.print(f"  File types:  {pluralize(filetypes, 'pattern')}", highlight=False)
    if log_file is not None:
        console.print(f"  Log file:    {log_file}", style="dim", highlight=False)
    console.print("  Press Ctrl+C to stop", style="dim", highlight=False)
    console.print()


@click.command()
@click.argument("path", default=None, required=False, type=click.Path(path_type=Path))
@click.option(
    "--root-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Root declaration to read when PATH is omitted (default: ./.tagwatch-root.yaml)",
)
@click.option("--delay", type=float, help="Override the quiet window in seconds")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write JSON logs at DEBUG level to this file",
)
@click.pass_context
def watch_command(
    ctx: click.Context,
    path: Path | None,
    root_file: Path | None,
    delay: float | None,
    log_file: Path | None,
) -> None:
    """Watch a source tree and regenerate tags files as it changes.

    PATH is the directory tree to watch. If not specified, it is read from
    the root declaration file.
    """
    from tagwatch.core.logging import configure_logging, get_log_file_path
    from tagwatch.daemon.lifecycle import WatchController, run_watcher

    root = find_root(path, root_file)
    config = load_settings(root)
    if delay is not None:
        if delay <= 0:
            raise click.BadParameter("must be positive", param_hint="--delay")
        config.watch.delay_sec = delay

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    configure_logging(config=build_logging_config(config.logging, verbose, log_file))

    registry = discover_filetypes(config.tags)
    _print_banner(
        root,
        config.watch.delay_sec,
        len(registry),
        config.tags.tags_file,
        get_log_file_path(),
    )

    controller = WatchController(root=root, config=config, registry=registry)
    try:
        asyncio.run(run_watcher(controller))
    except KeyboardInterrupt:
        pass
    click.echo("\nStopped")
