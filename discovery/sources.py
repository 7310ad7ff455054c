"""C source file discovery.

Starting from the sources a makefile lists for a program, follow quoted
``#include`` directives transitively to collect every ``.c`` / ``.h`` file
the program is built from. Files are located by name anywhere in the
repository, so a name shared by several files pulls in all of them.
"""

import os
import re
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Optional

from utils import get_logger
from utils.constants import DEFAULT_MAKEFILE_NAMES

from .makefile import sources_from_makefile

logger = get_logger(__name__)

_INCLUDE = re.compile(r'^\s*#\s*include\s+"([^"]+)"')

SKIPPED_DIRECTORIES = {".git"}


class SourceIndex:
    """Index of a repository's files by file name."""

    def __init__(self, repository: Path):
        self.repository = Path(repository)
        self._by_name: dict[str, list[Path]] = defaultdict(list)
        for root, directories, files in os.walk(self.repository):
            directories[:] = sorted(d for d in directories if d not in SKIPPED_DIRECTORIES)
            for file_name in sorted(files):
                self._by_name[file_name].append(Path(root) / file_name)
        logger.debug(f"Indexed {sum(len(v) for v in self._by_name.values())} files in {self.repository}")

    def find(self, file_name: str) -> list[Path]:
        """All files named ``file_name``, sorted (only the final path component is used)."""
        return sorted(self._by_name.get(Path(file_name).name, []))

    def relative(self, path: Path) -> Path:
        return Path(path).relative_to(self.repository)


def find_files(file_name: str, directory: Path) -> list[Path]:
    """Find every file named ``file_name`` under ``directory``, sorted."""
    return SourceIndex(directory).find(file_name)


def read_includes(path: Path) -> list[str]:
    """Names from the quoted ``#include`` directives of a source file."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Failed to read source file {path}: {e}")
        return []
    return [match.group(1) for match in map(_INCLUDE.match, text.splitlines()) if match]


def collect_source_files(index: SourceIndex, roots: Iterable[Path]) -> set[Path]:
    """Transitively collect ``roots`` and everything they include.

    Returns:
        Paths relative to the repository. Each file is visited once, so
        include cycles terminate.
    """
    visited: set[Path] = set()
    pending = list(roots)

    while pending:
        path = pending.pop()
        relative_path = index.relative(path)
        if relative_path in visited:
            continue
        visited.add(relative_path)

        for include in read_includes(path):
            pending.extend(index.find(include))

    return visited


def get_c_source_files(
    program_name: str,
    repository: Path,
    makefile_names: Optional[list[str]] = None,
    index: Optional[SourceIndex] = None,
) -> set[Path]:
    """Get the .c and .h source files of a C program.

    Args:
        program_name: The name of the C program, e.g. ``ls``
        repository: A local clone of the program's repository
        makefile_names: Build files to scan; the automake defaults when omitted
        index: Prebuilt index of ``repository``, reused across programs

    Returns:
        Source file paths relative to ``repository``

    Raises:
        FileNotFoundError: If the repository directory does not exist
    """
    repository = Path(repository)
    if not repository.is_dir():
        raise FileNotFoundError(f"Repository directory does not exist: {repository}")

    if index is None:
        index = SourceIndex(repository)
    roots: list[Path] = []
    for makefile_name in makefile_names or DEFAULT_MAKEFILE_NAMES:
        for makefile in index.find(makefile_name):
            for source in sources_from_makefile(makefile, program_name):
                matches = index.find(source)
                if not matches:
                    logger.debug(f"{makefile}: source '{source}' not found in repository")
                roots.extend(matches)

    source_files = collect_source_files(index, roots)
    logger.info(f"Found {len(source_files)} source files for '{program_name}' in {repository}")
    return source_files
