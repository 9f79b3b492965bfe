"""Configuration constants.

Values here are NOT user-configurable. For configurable values, see
models.py (WatchConfig, TagsConfig, LoggingConfig).
"""

# =============================================================================
# Reaction scheduling
# =============================================================================

MAX_PROCESSES = 1
"""Maximum ctags command chains in flight. Tags files are rewritten in place,
so two chains touching the same project must never overlap."""

MAX_DEBOUNCE_WAIT_FACTOR = 4.0
"""A continuous stream of changes is flushed after delay * this factor."""

# =============================================================================
# File names
# =============================================================================

ROOT_DECLARATION_FILE = ".tagwatch-root.yaml"
"""Default root declaration, looked up in the working directory."""

REPO_CONFIG_FILE = ".tagwatch.yaml"
"""Optional per-root configuration file."""

# =============================================================================
# Diagnostics
# =============================================================================

STDERR_TAIL_CHARS = 2000
"""How much ctags stderr is kept in logs when a reaction fails."""
