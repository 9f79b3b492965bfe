"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TAGWATCH__SECTION__KEY)
3. Root YAML (<root>/.tagwatch.yaml)
4. Global YAML (~/.config/tagwatch/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TAGWATCH__<SECTION>__<KEY>=<VALUE>

Examples:
    TAGWATCH__LOGGING__LEVEL=DEBUG
    TAGWATCH__WATCH__DELAY_SEC=2
    TAGWATCH__TAGS__CTAGS_COMMAND=/usr/local/bin/ctags
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_CTAGS_ARGS = (
    "--fields=+afikKlmnsSzt --c-kinds=+p --c++-kinds=+p --extra=+q --sort=foldcase"
)


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TAGWATCH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every ignored path.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class WatchConfig(BaseModel):
    """Change notification settings.

    Env vars:
        TAGWATCH__WATCH__DELAY_SEC: Quiet window before a batch is delivered
        TAGWATCH__WATCH__STOP_TIMEOUT_SEC: Grace period for shutdown
    """

    delay_sec: float = Field(
        default=5.0,
        description="Seconds without changes before a burst is delivered as one batch. "
        "Lower values run ctags more often during bulk edits.",
    )
    exclude: list[str] = Field(
        default_factory=lambda: [".*"],
        description="Globs matched against root-relative paths. Matching changes never "
        "reach the resolver. The default drops every dot-prefixed top-level entry.",
    )
    stop_timeout_sec: float = Field(
        default=2.0,
        description="How long shutdown waits for an in-flight ctags run.",
    )

    @field_validator("delay_sec")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"delay_sec must be positive, got {v}")
        return v


class TagsConfig(BaseModel):
    """ctags invocation settings.

    Env vars:
        TAGWATCH__TAGS__CTAGS_COMMAND: ctags executable
        TAGWATCH__TAGS__CTAGS_ARGS: Arguments passed to every ctags run
        TAGWATCH__TAGS__TAGS_FILE: Marker/output file name
        TAGWATCH__TAGS__EXCLUDE_FILE: Exclusion list file name
    """

    ctags_command: str = Field(
        default="ctags",
        description="ctags executable. Must support --list-maps, -f and -R "
        "(Exuberant or Universal ctags).",
    )
    ctags_args: str = Field(
        default=DEFAULT_CTAGS_ARGS,
        description="Extra arguments inserted before the exclude/output/scan flags. "
        "Passed through the shell verbatim.",
    )
    tags_file: str = Field(
        default=".tags",
        description="Marker file name. Its directory is a project root and the file "
        "itself receives that project's tags.",
    )
    exclude_file: str = Field(
        default=".tags.exclude",
        description="Exclusion list next to a marker, one pattern per line.",
    )
    list_maps_args: list[str] = Field(
        default_factory=lambda: ["--list-maps"],
        description="Arguments that make ctags print its language file name patterns.",
    )

    @field_validator("tags_file", "exclude_file")
    @classmethod
    def validate_bare_name(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Must be a bare file name, got {v!r}")
        return v


class TagwatchConfig(BaseModel):
    """Root configuration for tagwatch.

    All settings can be configured via:
    1. Environment variables: TAGWATCH__SECTION__KEY
    2. YAML config files (root or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)
