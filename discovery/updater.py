"""Rewrite the C source paths of a metadata file from a repository clone."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from corpus.parser import parse_document
from corpus.writer import MetadataWriter
from utils import get_logger

from .sources import SourceIndex, get_c_source_files

logger = get_logger(__name__)


@dataclass
class UpdateReport:
    """Which pairs got new source paths and which were left alone."""

    metadata_file: Path
    updated: dict[str, int] = field(default_factory=dict)
    unchanged: list[str] = field(default_factory=list)


def update_metadata_file(
    metadata_file: Path,
    repository: Path,
    makefile_names: Optional[list[str]] = None,
    writer: Optional[MetadataWriter] = None,
) -> UpdateReport:
    """Set ``c_program.source_paths`` of every pair from the repository's makefiles.

    Pairs for which nothing is discovered keep their current paths. The file
    keeps its shape: project metadata stays project metadata.

    Args:
        metadata_file: Metadata file to update in place
        repository: Local clone of the C repository
        makefile_names: Build files to scan
        writer: MetadataWriter to use

    Returns:
        UpdateReport

    Raises:
        ParserError: If the metadata file is invalid
        WriterError: If the file cannot be written back
        FileNotFoundError: If the repository does not exist
    """
    metadata_file = Path(metadata_file)
    writer = writer or MetadataWriter()
    document = parse_document(metadata_file)
    report = UpdateReport(metadata_file=metadata_file)
    index = SourceIndex(repository)

    for pair in document.pairs:
        discovered = get_c_source_files(pair.program_name, repository, makefile_names, index=index)
        if not discovered:
            logger.warning(f"No C sources discovered for '{pair.program_name}', keeping existing paths")
            report.unchanged.append(pair.program_name)
            continue
        pair.c_program.source_paths = sorted(path.as_posix() for path in discovered)
        report.updated[pair.program_name] = len(discovered)

    writer.write(document, metadata_file, overwrite=True)
    logger.info(f"Successfully updated metadata at: {metadata_file}")
    return report
