"""Tabular view of the corpus.

Loads every metadata file and flattens the pairs into a pandas DataFrame,
one row per program pair, for listing, duplicate detection and export.
"""

from pathlib import Path

import pandas as pd

from config.schema import CorpusConfig
from utils import get_file_extension, get_logger, is_supported_catalog_format

from .errors import ParserError
from .parser import parse
from .schema import Metadata

logger = get_logger(__name__)

CATALOG_COLUMNS = [
    "program_name",
    "program_description",
    "feature_relationship",
    "translation_tools",
    "c_repository_url",
    "rust_repository_url",
    "c_source_count",
    "rust_source_count",
    "metadata_file",
]


class CatalogError(Exception):
    """Raised when the catalog cannot be exported."""

    pass


def metadata_files(config: CorpusConfig, demo: bool = False) -> list[Path]:
    """All metadata files in the configured directories, skipping missing ones."""
    files = []
    for directory in config.metadata_directories(demo=demo):
        if not directory.is_dir():
            logger.warning(f"Metadata directory not found: {directory}")
            continue
        files.extend(sorted(entry for entry in directory.iterdir() if entry.is_file()))
    return files


def load_corpus(
    config: CorpusConfig, demo: bool = False
) -> tuple[list[tuple[Path, Metadata]], dict[Path, str]]:
    """Parse every metadata file.

    Returns:
        Tuple of (parsed (path, metadata) entries, errors by path)
    """
    entries = []
    errors = {}
    for path in metadata_files(config, demo=demo):
        try:
            entries.append((path, parse(path)))
        except ParserError as e:
            logger.error(f"Failed to parse '{path}': {e}")
            errors[path] = str(e)
    return entries, errors


def build_catalog(entries: list[tuple[Path, Metadata]]) -> pd.DataFrame:
    """Flatten parsed metadata into one row per program pair."""
    rows = []
    for path, metadata in entries:
        for pair in metadata.pairs:
            rows.append(
                {
                    "program_name": pair.program_name,
                    "program_description": pair.program_description,
                    "feature_relationship": pair.feature_relationship.value,
                    "translation_tools": ", ".join(pair.translation_tools),
                    "c_repository_url": pair.c_program.repository_url,
                    "rust_repository_url": pair.rust_program.repository_url,
                    "c_source_count": len(pair.c_program.source_paths),
                    "rust_source_count": len(pair.rust_program.source_paths),
                    "metadata_file": Path(path).name,
                }
            )
    return pd.DataFrame(rows, columns=CATALOG_COLUMNS)


def find_duplicate_programs(catalog: pd.DataFrame) -> list[str]:
    """Program names listed more than once; they share a download directory."""
    if catalog.empty:
        return []
    counts = catalog["program_name"].value_counts()
    return sorted(counts[counts > 1].index.tolist())


def summarize_catalog(catalog: pd.DataFrame) -> dict:
    """Counts of pairs per feature relationship and per metadata file."""
    return {
        "total_pairs": int(len(catalog)),
        "by_feature_relationship": {
            str(k): int(v) for k, v in catalog["feature_relationship"].value_counts().sort_index().items()
        },
        "by_metadata_file": {
            str(k): int(v) for k, v in catalog["metadata_file"].value_counts().sort_index().items()
        },
    }


def export_catalog(catalog: pd.DataFrame, path: Path) -> Path:
    """Write the catalog as CSV or JSON, chosen by file extension.

    Raises:
        CatalogError: If the format is unsupported or the write fails
    """
    path = Path(path)
    extension = get_file_extension(path)
    if not is_supported_catalog_format(path):
        raise CatalogError(f"Unsupported catalog format: .{extension} (use .csv or .json)")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if extension == "csv":
            catalog.to_csv(path, index=False)
        else:
            catalog.to_json(path, orient="records", indent=2, force_ascii=False)
    except OSError as e:
        raise CatalogError(f"Failed to write catalog to '{path}': {e}") from e

    logger.info(f"Catalog with {len(catalog)} pairs written to {path}")
    return path
