"""File name patterns understood by ctags.

The registry is discovered once at startup by running ``ctags --list-maps``
and is immutable afterwards. Output looks like::

    C        *.c
    C++      *.c++ *.cc *.cp *.cpp *.cxx *.h *.h++ *.hh *.hp *.hpp *.hxx
    Make     *.mak *.mk [Mm]akefile GNUmakefile
    Automake (Makefile.am) (GNUmakefile.am)

The first token of each line is a language name. Every other token is a
glob, except parenthesized tokens (Universal ctags) which are exact names.
"""

from __future__ import annotations

import re
import shlex
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from tagwatch.config.constants import STDERR_TAIL_CHARS
from tagwatch.core.errors import ToolError

logger = structlog.get_logger()

DISCOVERY_TIMEOUT_SEC = 30


def _glob_to_regex(glob: str) -> str:
    """Translate a ctags glob into a regex anchored at the end of a name.

    ``*`` matches anything, ``?`` one character, ``[...]`` classes are kept
    and every other character (dots included) is literal.
    """
    out: list[str] = []
    i = 0
    while i < len(glob):
        c = glob[i]
        if c == "*":
            out.append(".*")
        elif c == "?":
            out.append(".")
        elif c == "[" and (end := glob.find("]", i + 2)) != -1:
            body = glob[i + 1 : end]
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
            i = end
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out) + r"\Z"


@dataclass(frozen=True)
class FileTypePattern:
    """A compiled ctags file name pattern."""

    token: str
    regex: re.Pattern[str]
    exact: bool = False

    @classmethod
    def compile(cls, token: str) -> FileTypePattern:
        if len(token) > 2 and token.startswith("(") and token.endswith(")"):
            name = token[1:-1]
            return cls(token=token, regex=re.compile(re.escape(name) + r"\Z"), exact=True)
        return cls(token=token, regex=re.compile(_glob_to_regex(token)))

    def matches(self, filename: str) -> bool:
        if self.exact:
            return self.regex.match(filename) is not None
        return self.regex.search(filename) is not None


def parse_list_maps(output: str) -> list[str]:
    """Extract pattern tokens from ``--list-maps`` output, in order, deduplicated."""
    tokens: dict[str, None] = {}
    for line in output.splitlines():
        fields = line.split()
        if not fields or fields[0].startswith("#"):
            continue
        for token in fields[1:]:
            tokens.setdefault(token, None)
    return list(tokens)


@dataclass(frozen=True)
class FileTypeRegistry:
    """Immutable set of file name patterns known to ctags."""

    patterns: frozenset[FileTypePattern]

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> FileTypeRegistry:
        patterns = []
        for token in tokens:
            pattern = FileTypePattern.compile(token)
            logger.debug("filetype_added", token=token, regex=pattern.regex.pattern)
            patterns.append(pattern)
        return cls(patterns=frozenset(patterns))

    @classmethod
    def discover(
        cls,
        ctags_command: str,
        list_maps_args: list[str] | None = None,
    ) -> FileTypeRegistry:
        """Ask ctags for its file name patterns.

        Raises:
            ToolError: If ctags cannot be run, fails, or lists no patterns.
        """
        try:
            argv = shlex.split(ctags_command)
        except ValueError as e:
            raise ToolError.discovery_failed(ctags_command, -1, f"unparsable command: {e}") from e
        if not argv:
            raise ToolError.not_found(ctags_command)

        cmd = [*argv, *(list_maps_args or ["--list-maps"])]
        logger.info("filetypes_discovering", command=shlex.join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=DISCOVERY_TIMEOUT_SEC,
                check=False,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ToolError.not_found(ctags_command) from e
        except OSError as e:
            # e.g. ENOEXEC: the file exists but cannot be executed
            raise ToolError.discovery_failed(ctags_command, -1, e.strerror or str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise ToolError.discovery_failed(ctags_command, -1, "timed out") from e

        if result.returncode != 0:
            raise ToolError.discovery_failed(
                ctags_command, result.returncode, result.stderr[-STDERR_TAIL_CHARS:]
            )

        tokens = parse_list_maps(result.stdout)
        if not tokens:
            raise ToolError.no_filetypes(ctags_command)

        registry = cls.from_tokens(tokens)
        logger.info("filetypes_discovered", count=len(registry))
        return registry

    def matches(self, filename: str) -> bool:
        """True if *filename* matches at least one known pattern."""
        return any(p.matches(filename) for p in self.patterns)

    def tokens(self) -> list[str]:
        return sorted(p.token for p in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
