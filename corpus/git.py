"""Thin wrapper around the ``git`` command line.

Clones run with the user's global and system git configuration disabled so
that local settings (URL rewrites, credential helpers, hooks) cannot change
what gets downloaded.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from utils import get_logger

from .errors import CloneError

logger = get_logger(__name__)


def isolated_git_environment() -> dict[str, str]:
    """Environment for git subprocesses that ignores user/system config."""
    env = dict(os.environ)
    env["GIT_CONFIG_GLOBAL"] = os.devnull
    env["GIT_CONFIG_NOSYSTEM"] = "1"
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def is_repository(path: Path) -> bool:
    """True if ``path`` is the working tree of a git clone."""
    return (Path(path) / ".git").exists()


class GitClient:
    """Runs shallow clones through ``subprocess``."""

    def __init__(self, executable: str = "git", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def clone(self, repository_url: str, destination: Path, depth: int = 1) -> Path:
        """Shallow-clone a repository.

        Args:
            repository_url: URL to clone
            destination: Working tree to create (must not exist)
            depth: Number of commits to fetch

        Returns:
            The destination path

        Raises:
            CloneError: If git is missing, fails, or times out. Partial
                clones are removed.
        """
        destination = Path(destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CloneError(
                f"Failed to clone repository '{repository_url}': cannot create '{destination.parent}': {e}",
                repository_url,
            ) from e

        command = [
            self.executable,
            "clone",
            "--depth",
            str(depth),
            "--no-tags",
            repository_url,
            str(destination),
        ]
        logger.debug(f"Running: {' '.join(command)}")

        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=isolated_git_environment(),
            )
        except FileNotFoundError as e:
            raise CloneError(
                f"Failed to clone repository '{repository_url}': git executable "
                f"'{self.executable}' not found",
                repository_url,
            ) from e
        except subprocess.CalledProcessError as e:
            self._cleanup(destination)
            stderr = e.stderr.strip() if e.stderr else str(e)
            raise CloneError(
                f"Failed to clone repository '{repository_url}': {stderr}",
                repository_url,
            ) from e
        except subprocess.TimeoutExpired as e:
            self._cleanup(destination)
            raise CloneError(
                f"Failed to clone repository '{repository_url}': timed out after {self.timeout}s",
                repository_url,
            ) from e

        logger.info(f"Cloned {repository_url} into {destination}")
        return destination

    @staticmethod
    def _cleanup(destination: Path) -> None:
        if destination.exists():
            shutil.rmtree(destination, ignore_errors=True)
