"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides a stand-in ctags executable so tests never depend on a real one.
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of tagwatch modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("tagwatch"):
        del sys.modules[module_name]

from tagwatch.tags.filetypes import FileTypeRegistry  # noqa: E402

LIST_MAPS_OUTPUT = """\
C        *.c *.h
C++      *.c++ *.cc *.cpp *.cxx *.hh *.hpp
Python   *.py *.pyx *.pxd *.scons
Make     *.mak *.mk [Mm]akefile GNUmakefile
Automake (Makefile.am)
"""

# Answers --list-maps like ctags does. Any other invocation writes its
# arguments into the -f file, so tests can see what ctags was asked to do.
FAKE_CTAGS = f"""\
#!/bin/sh
if [ "$1" = "--list-maps" ]; then
  cat <<'EOF'
{LIST_MAPS_OUTPUT}EOF
  exit 0
fi
args="$*"
out=""
while [ $# -gt 0 ]; do
  case "$1" in
    -f) out="$2"; shift 2 ;;
    *) shift ;;
  esac
done
printf '%s\\n' "$args" > "$out"
"""

FAILING_CTAGS = """\
#!/bin/sh
echo "ctags: broken on purpose" >&2
exit 3
"""


def _write_script(path: Path, body: str) -> Path:
    path.write_text(body)
    path.chmod(0o755)
    return path


@pytest.fixture
def fake_ctags(tmp_path: Path) -> Path:
    """Executable that behaves enough like ctags for discovery and runs."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    return _write_script(bin_dir / "ctags", FAKE_CTAGS)


@pytest.fixture
def failing_ctags(tmp_path: Path) -> Path:
    """Executable that always exits 3 with a message on stderr."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    return _write_script(bin_dir / "ctags-broken", FAILING_CTAGS)


@pytest.fixture
def registry() -> FileTypeRegistry:
    """Registry with a handful of C and Python patterns."""
    return FileTypeRegistry.from_tokens(["*.c", "*.h", "*.py", "[Mm]akefile"])


@pytest.fixture
def project(tmp_path: Path) -> Generator[Path, None, None]:
    """A project tree with a marker at its top.

    repo/
      .tags
      src/a.c
      src/b.c
      docs/readme.md
    """
    repo = tmp_path / "repo"
    (repo / "src").mkdir(parents=True)
    (repo / "docs").mkdir()
    (repo / ".tags").write_text("")
    (repo / "src" / "a.c").write_text("int a;\n")
    (repo / "src" / "b.c").write_text("int b;\n")
    (repo / "docs" / "readme.md").write_text("# readme\n")
    yield repo
