"""Corpus management for C-Rust program pairs.

This package turns metadata files into typed program pairs, writes them
back, downloads the pairs from their repositories, and cleans up afterwards.

Key principles:
- Metadata is validated before anything is downloaded
- One broken file or pair never stops the rest of the corpus
- Repositories are cloned once and reused
"""

from .catalog import (
    CatalogError,
    build_catalog,
    export_catalog,
    find_duplicate_programs,
    load_corpus,
    metadata_files,
    summarize_catalog,
)
from .delete import delete
from .downloader import DownloadSummary, ProgramPairDownloader, download_program_pairs
from .errors import (
    CloneError,
    DownloaderError,
    MetadataValidationError,
    ParserError,
    WriterError,
)
from .git import GitClient
from .parser import normalize, parse, parse_document
from .schema import (
    FeatureRelationship,
    IndividualPairsMetadata,
    Language,
    Metadata,
    MetadataDocument,
    Program,
    ProgramPair,
    ProjectPairsMetadata,
)
from .writer import MetadataWriter

__all__ = [
    "CatalogError",
    "CloneError",
    "DownloadSummary",
    "DownloaderError",
    "FeatureRelationship",
    "GitClient",
    "IndividualPairsMetadata",
    "Language",
    "Metadata",
    "MetadataDocument",
    "MetadataValidationError",
    "MetadataWriter",
    "ParserError",
    "Program",
    "ProgramPair",
    "ProgramPairDownloader",
    "ProjectPairsMetadata",
    "WriterError",
    "build_catalog",
    "delete",
    "download_program_pairs",
    "export_catalog",
    "find_duplicate_programs",
    "load_corpus",
    "metadata_files",
    "normalize",
    "parse",
    "parse_document",
    "summarize_catalog",
]
