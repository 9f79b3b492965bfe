"""Root declaration file loading.

The declaration is a one-document YAML file whose value is the absolute path
of the directory tree to watch::

    /home/me/src

It is read once at startup. Anything other than an existing absolute
directory is fatal: every later decision is relative to this root.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from tagwatch.core.errors import ConfigError


def load_root_declaration(path: Path) -> Path:
    """Evaluate the declaration at *path* and return the declared root.

    Raises:
        ConfigError: If the file is missing, unparsable, or does not declare
            an existing absolute directory.
    """
    if not path.is_file():
        raise ConfigError.file_not_found(str(path))

    try:
        value = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    except OSError as e:
        raise ConfigError.parse_error(str(path), e.strerror or str(e)) from e

    if value is None:
        raise ConfigError.missing_required("root")
    if not isinstance(value, str):
        raise ConfigError.invalid_root(value, "declaration must be a single path string")

    return validate_root(Path(value).expanduser())


def validate_root(root: Path) -> Path:
    """Check that *root* is an existing absolute directory."""
    if not root.is_absolute():
        raise ConfigError.invalid_root(str(root), "path must be absolute")
    if not root.is_dir():
        raise ConfigError.invalid_root(str(root), "not an existing directory")
    return root
