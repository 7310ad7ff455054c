"""Automake parsing: which sources does a program list?

Only the ``<program>_SOURCES`` variables are read. Conditionals, variable
expansion and generated sources are out of reach of a line-based reader and
are ignored.
"""

import re
from pathlib import Path
from typing import Iterable

from utils import get_logger

logger = get_logger(__name__)

_ASSIGNMENT = re.compile(r"^\s*([A-Za-z0-9_@]+)\s*(\+?=)\s*(.*)$")
_NON_CANONICAL = re.compile(r"[^A-Za-z0-9_@]")


def canonical_program_name(program_name: str) -> str:
    """Automake's canonical form of a program name (``git-ls`` -> ``git_ls``, ``[`` -> ``_``)."""
    return _NON_CANONICAL.sub("_", program_name)


def normalize_makefile(lines: Iterable[str]) -> list[str]:
    """Join backslash-continued lines into logical lines.

    A trailing continuation at end of input still yields its line.
    """
    normalized = []
    continued_line = ""

    for line in lines:
        trimmed = line.rstrip()
        if trimmed.endswith("\\"):
            continued_line += trimmed.rstrip("\\") + " "
        else:
            normalized.append(continued_line + trimmed)
            continued_line = ""

    if continued_line:
        normalized.append(continued_line.rstrip())

    return normalized


def is_sources_variable(variable: str, program_name: str) -> bool:
    """True if ``variable`` holds the sources of ``program_name``.

    Matches ``ls_SOURCES`` as well as directory-prefixed forms such as
    ``src_ls_SOURCES``.
    """
    key = f"{canonical_program_name(program_name)}_SOURCES"
    return variable == key or variable.endswith(f"_{key}")


def parse_sources(lines: Iterable[str], program_name: str) -> list[str]:
    """Source names assigned to ``program_name`` in makefile text.

    Make variables (``$(...)``) and comments are skipped. Order is kept and
    duplicates removed.
    """
    sources: list[str] = []
    for line in normalize_makefile(lines):
        match = _ASSIGNMENT.match(line)
        if not match or not is_sources_variable(match.group(1), program_name):
            continue
        for token in match.group(3).split():
            if token.startswith("#"):
                break
            if token.startswith("$"):
                continue
            if token not in sources:
                sources.append(token)
    return sources


def sources_from_makefile(makefile_path: Path, program_name: str) -> list[str]:
    """Read a makefile and return the sources it lists for ``program_name``.

    An unreadable makefile is logged and yields no sources.
    """
    try:
        text = Path(makefile_path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Failed to read makefile {makefile_path}: {e}")
        return []
    return parse_sources(text.splitlines(), program_name)
