"""Cleanup of downloaded program pairs and repository clones."""

from pathlib import Path

from config.schema import CorpusConfig
from utils import get_logger, remove_directory

logger = get_logger(__name__)


def delete(config: CorpusConfig) -> list[Path]:
    """Remove all downloaded program pairs and repository clones.

    Directories that do not exist are skipped.

    Returns:
        The directories that were removed

    Raises:
        OSError: If a directory exists but cannot be removed
    """
    removed = []
    for directory in (config.program_pairs_directory, config.repository_clones_directory):
        if remove_directory(directory):
            logger.info(f"Deleted {directory}")
            removed.append(Path(directory))
    return removed
