"""Program pair downloader.

This module downloads the corpus of C-Rust program pairs.

First it reads program pairs from metadata files. Then it clones the
repositories named in the metadata (once, into a local cache) and copies
each program's source paths into ``program_pairs/<program_name>/``.

A failure to parse one metadata file, or to download one pair, is logged and
skipped so that a single broken entry does not stop the whole corpus.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from config.schema import CorpusConfig
from utils import (
    copy_directory_contents,
    count_files,
    get_logger,
    get_repository_name,
)
from utils.constants import C_PROGRAM_DIR, RUST_PROGRAM_DIR

from .errors import DownloaderError, ParserError
from .git import GitClient, is_repository
from .parser import parse
from .schema import Language, Metadata, Program, ProgramPair

logger = get_logger(__name__)


@dataclass
class DownloadSummary:
    """Outcome of a download run."""

    files_processed: int = 0
    files_failed: list[str] = field(default_factory=list)
    pairs_downloaded: list[str] = field(default_factory=list)
    pairs_failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.files_failed and not self.pairs_failed


class ProgramPairDownloader:
    """Downloads program pairs listed in metadata files.

    Args:
        config: Corpus layout
        git: Git client used for clones (a GitClient by default)
        show_progress: Display a progress bar over metadata files
    """

    def __init__(
        self,
        config: CorpusConfig,
        git: Optional[GitClient] = None,
        show_progress: bool = True,
    ):
        self.config = config
        self.git = git or GitClient(timeout=config.clone_timeout)
        self.show_progress = show_progress

    def download_metadata(self, demo: bool = False) -> DownloadSummary:
        """Read all metadata files and download every program pair.

        Args:
            demo: Only download the pairs under ``metadata/demo/``

        Returns:
            DownloadSummary for the run

        Raises:
            DownloaderError: If a metadata directory cannot be read
        """
        directories = self.config.metadata_directories(demo=demo)

        total_files = 0
        for directory in directories:
            try:
                total_files += count_files(directory)
            except OSError as e:
                raise DownloaderError(f"Failed to read '{directory}': {e}") from e

        logger.info(f"Processing {total_files} metadata files from {len(directories)} directories")
        summary = DownloadSummary()

        with tqdm(
            total=total_files,
            desc="Processing metadata files",
            unit="file",
            disable=not self.show_progress,
        ) as progress:
            for directory in directories:
                self.download_from_metadata_directory(directory, summary, progress)

        logger.info(
            f"Downloaded {len(summary.pairs_downloaded)} program pairs "
            f"({len(summary.pairs_failed)} failed, {len(summary.files_failed)} metadata files skipped)"
        )
        return summary

    def download_from_metadata_directory(
        self,
        directory: Path,
        summary: DownloadSummary,
        progress: Optional[tqdm] = None,
    ) -> None:
        """Download the program pairs of every metadata file in a directory.

        Raises:
            DownloaderError: If the directory cannot be read
        """
        try:
            metadata_files = sorted(entry for entry in Path(directory).iterdir() if entry.is_file())
        except OSError as e:
            raise DownloaderError(f"Failed to read '{directory}': {e}") from e

        for metadata_file in metadata_files:
            try:
                metadata = parse(metadata_file)
            except ParserError as e:
                logger.error(f"Failed to parse '{metadata_file}': {e}")
                summary.files_failed.append(str(metadata_file))
            else:
                self.download_from_metadata(metadata, summary, progress)

            summary.files_processed += 1
            if progress is not None:
                progress.update(1)

    def download_from_metadata(
        self,
        metadata: Metadata,
        summary: DownloadSummary,
        progress: Optional[tqdm] = None,
    ) -> None:
        """Download all program pairs of one metadata file, continuing past failures."""
        for pair in metadata.pairs:
            if progress is not None:
                progress.set_postfix_str(pair.program_name)
            try:
                self.download_program_pair(pair)
            except DownloaderError as e:
                logger.error(f"Failed to download '{pair.program_name}': {e}")
                summary.pairs_failed.append(pair.program_name)
            else:
                summary.pairs_downloaded.append(pair.program_name)

    def program_pair_directory(self, pair: ProgramPair) -> Path:
        return self.config.program_pairs_directory / pair.program_name

    def download_program_pair(self, pair: ProgramPair) -> Path:
        """Download one C-Rust program pair.

        Creates ``<pairs>/<name>/c-program`` and ``<pairs>/<name>/rust-program``
        and fills them with the source paths of each program.

        Returns:
            The pair's directory

        Raises:
            DownloaderError: If a repository or source path cannot be obtained
        """
        base_directory = self.program_pair_directory(pair)
        destinations = {
            Language.C: base_directory / C_PROGRAM_DIR,
            Language.RUST: base_directory / RUST_PROGRAM_DIR,
        }

        for destination in destinations.values():
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DownloaderError(f"Failed to create '{destination}': {e}") from e

        for language, destination in destinations.items():
            self.download_files(pair.program_name, pair.program(language), destination)

        return base_directory

    def download_files(self, program_name: str, program: Program, program_directory: Path) -> None:
        """Copy a program's source paths from its repository into ``program_directory``.

        Directories are copied recursively with their contents placed directly
        in ``program_directory``; files keep their file name. Existing files
        are overwritten.

        Raises:
            DownloaderError: If the repository cannot be cloned or a path is missing
        """
        repository_directory = self.obtain_repository(program.language, program.repository_url)

        for source_path in program.source_paths:
            source = repository_directory / source_path
            try:
                if source.is_dir():
                    copy_directory_contents(source, program_directory)
                elif source.is_file():
                    shutil.copy2(source, program_directory / source.name)
                else:
                    raise DownloaderError(
                        f"Source path '{source_path}' not found in {program.repository_url}"
                    )
            except OSError as e:
                raise DownloaderError(
                    f"Failed to copy '{source}' to '{program_directory}': {e}"
                ) from e

        logger.info(f"Downloaded '{program_name}' ({program.language.value})")

    def repository_directory(self, language: Language, repository_url: str) -> Path:
        """Cache location of a repository: ``<clones>/<language>/<name>``."""
        repository_name = get_repository_name(repository_url)
        if repository_name is None:
            raise DownloaderError(f"Failed to get repository name from URL '{repository_url}'")
        return self.config.repository_clones_directory / language.value / repository_name

    def obtain_repository(self, language: Language, repository_url: str) -> Path:
        """Return a working tree for the repository, cloning it if not cached."""
        destination = self.repository_directory(language, repository_url)
        if is_repository(destination):
            logger.debug(f"Using cached clone {destination}")
            return destination

        if destination.exists() or destination.is_symlink():
            logger.warning(f"Removing incomplete clone at {destination}")
            try:
                if destination.is_dir() and not destination.is_symlink():
                    shutil.rmtree(destination)
                else:
                    destination.unlink()
            except OSError as e:
                raise DownloaderError(f"Failed to remove stale clone '{destination}': {e}") from e

        logger.info(f"Cloning repository {repository_url}...")
        return self.git.clone(repository_url, destination, depth=self.config.clone_depth)


def download_program_pairs(config: CorpusConfig, demo: bool = False) -> DownloadSummary:
    """Download every program pair (or only the demo pairs)."""
    return ProgramPairDownloader(config).download_metadata(demo=demo)
