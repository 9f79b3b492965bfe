"""CLI utilities."""

from pathlib import Path

import click

from tagwatch.config.constants import ROOT_DECLARATION_FILE
from tagwatch.config.loader import load_config
from tagwatch.config.models import LoggingConfig, LogOutputConfig, TagsConfig, TagwatchConfig
from tagwatch.config.root_decl import load_root_declaration, validate_root
from tagwatch.core.errors import ConfigError, ToolError
from tagwatch.tags.filetypes import FileTypeRegistry


def find_root(path: Path | None = None, root_file: Path | None = None) -> Path:
    """Determine the directory tree to watch.

    An explicit PATH wins. Otherwise the root declaration is read, from
    *root_file* or from .tagwatch-root.yaml in the working directory.

    Raises:
        click.ClickException: If no valid root can be determined
    """
    try:
        if path is not None:
            return validate_root(path.expanduser().resolve())
        declaration = root_file or Path.cwd() / ROOT_DECLARATION_FILE
        return load_root_declaration(declaration).resolve()
    except ConfigError as e:
        raise click.ClickException(
            f"{e.message}\n"
            f"Pass the directory to watch, or create {ROOT_DECLARATION_FILE} containing "
            "its absolute path."
        ) from e


def load_settings(root: Path | None) -> TagwatchConfig:
    """Load configuration, turning config errors into CLI errors."""
    try:
        return load_config(root)
    except ConfigError as e:
        raise click.ClickException(e.message) from e


def discover_filetypes(tags: TagsConfig) -> FileTypeRegistry:
    """Run ctags file type discovery; failure is fatal for every command."""
    try:
        return FileTypeRegistry.discover(tags.ctags_command, tags.list_maps_args)
    except ToolError as e:
        raise click.ClickException(
            f"{e.message}\nInstall Exuberant or Universal ctags, or set tags.ctags_command."
        ) from e


def build_logging_config(
    logging_config: LoggingConfig, verbose: bool = False, log_file: Path | None = None
) -> LoggingConfig:
    """Configured outputs, with --verbose forcing consoles to DEBUG and --log-file added.

    The root level is DEBUG so each output filters on its own level.
    """
    outputs = [
        output.model_copy(
            update={
                "level": "DEBUG"
                if verbose and output.destination in ("stderr", "stdout")
                else (output.level or logging_config.level)
            }
        )
        for output in logging_config.outputs
    ]
    if log_file is not None:
        outputs.append(
            LogOutputConfig(
                destination=str(log_file.expanduser().resolve()),
                format="json",
                level="DEBUG",
            )
        )
    return LoggingConfig(level="DEBUG", outputs=outputs)
