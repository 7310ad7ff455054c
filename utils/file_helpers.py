"""File helper utilities for PairCorpus.

This module provides common file operations used across the application:
path validation, file counting, recursive copies and
repository name extraction.
"""

import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import urlparse

from .constants import SUPPORTED_CATALOG_FORMATS, SUPPORTED_CONFIG_FORMATS

logger = logging.getLogger(__name__)


class PathValidationError(Exception):
    """Raised when path validation fails."""

    pass


def get_file_extension(file_path: str | Path) -> str:
    """Get file extension from path.

    Args:
        file_path: File path

    Returns:
        File extension (without dot), empty string if no extension
    """
    path = Path(file_path)
    return path.suffix.lstrip(".").lower()


def is_supported_config_format(file_path: str | Path) -> bool:
    """Check if file is a supported config format."""
    return get_file_extension(file_path) in SUPPORTED_CONFIG_FORMATS


def is_supported_catalog_format(file_path: str | Path) -> bool:
    """Check if file is a supported catalog export format."""
    return get_file_extension(file_path) in SUPPORTED_CATALOG_FORMATS


def validate_path_safe(
    file_path: str | Path,
    must_exist: bool = False,
    must_be_file: bool = False,
    must_be_dir: bool = False,
) -> Path:
    """Validate a user-supplied path and resolve it.

    Args:
        file_path: Path to validate
        must_exist: If True, path must exist
        must_be_file: If True, path must be a file
        must_be_dir: If True, path must be a directory

    Returns:
        Resolved Path object

    Raises:
        PathValidationError: If path contains traversal or violates constraints
        FileNotFoundError: If the path is required to exist and doesn't
    """
    path = Path(file_path).expanduser()

    if ".." in path.parts:
        raise PathValidationError(
            f"Path contains directory traversal sequence: {file_path}"
        )

    try:
        resolved = path.resolve()
    except (OSError, RuntimeError) as e:
        raise PathValidationError(f"Failed to resolve path {file_path}: {e}") from e

    if must_exist and not resolved.exists():
        raise FileNotFoundError(f"Path does not exist: {file_path}")

    if must_be_file and not resolved.is_file():
        if resolved.exists():
            raise PathValidationError(f"Path is not a file: {file_path}")
        else:
            raise FileNotFoundError(f"File does not exist: {file_path}")

    if must_be_dir and not resolved.is_dir():
        if resolved.exists():
            raise PathValidationError(f"Path is not a directory: {file_path}")
        else:
            raise FileNotFoundError(f"Directory does not exist: {file_path}")

    return resolved


def is_safe_relative_path(path: str) -> bool:
    """Check that a path stays inside whatever directory it is joined to.

    Source paths in metadata are joined onto a repository clone, so they
    must be relative and must not climb out with ``..``.

    Args:
        path: POSIX-style relative path

    Returns:
        True if the path is relative and free of traversal
    """
    if not path or not path.strip():
        return False
    posix = PurePosixPath(path.replace("\\", "/"))
    if posix.is_absolute() or ".." in posix.parts:
        return False
    return True


def count_files(directory: Path) -> int:
    """Count regular files directly inside a directory.

    Args:
        directory: Directory to inspect

    Returns:
        Number of regular files (subdirectories are not counted)

    Raises:
        OSError: If the directory cannot be read
    """
    return sum(1 for entry in Path(directory).iterdir() if entry.is_file())


def copy_directory_contents(source: Path, destination: Path) -> int:
    """Recursively copy the contents of ``source`` into ``destination``.

    Existing files at the destination are overwritten.

    Args:
        source: Directory whose contents are copied
        destination: Directory that receives the contents

    Returns:
        Number of files copied

    Raises:
        OSError: If a file cannot be copied
    """
    source = Path(source)
    destination = Path(destination)
    copied = 0
    for entry in sorted(source.rglob("*")):
        if not entry.is_file():
            continue
        target = destination / entry.relative_to(source)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(entry, target)
        copied += 1
    logger.debug(f"Copied {copied} files from {source} to {destination}")
    return copied


def remove_directory(path: Path) -> bool:
    """Remove a directory tree if it exists.

    Returns:
        True if something was removed
    """
    path = Path(path)
    if not path.exists():
        return False
    shutil.rmtree(path)
    logger.debug(f"Removed directory: {path}")
    return True


def get_repository_name(repository_url: str) -> Optional[str]:
    """Extract the repository name from a git URL.

    Handles https URLs, scp-like ``git@host:owner/repo.git`` URLs and local
    paths. Trailing slashes and a ``.git`` suffix are dropped.

    Args:
        repository_url: URL of the repository

    Returns:
        The repository name, or None if the URL has no usable final segment
    """
    url = repository_url.strip()
    parsed = urlparse(url)
    path = parsed.path if parsed.scheme and parsed.netloc else url
    # scp-like syntax: everything after the colon is the path
    if not parsed.netloc and ":" in path and not path.startswith("/"):
        path = path.split(":", 1)[1]

    segment = path.rstrip("/").rsplit("/", 1)[-1]
    if segment.endswith(".git"):
        segment = segment[: -len(".git")]
    if not segment or segment in (".", ".."):
        return None
    return segment
