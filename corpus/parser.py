"""Metadata parsing and validation.

The main entry point is ``parse``, which takes a path to a JSON metadata
file and returns a normalized ``Metadata`` instance. ``parse_document``
returns the validated on-disk shape instead, for callers that write the
file back.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from config.loader import format_validation_error
from utils import get_logger

from .errors import MetadataValidationError, ParserError
from .schema import (
    IndividualPairsMetadata,
    Language,
    Metadata,
    MetadataDocument,
    Program,
    ProgramPair,
    ProjectPairsMetadata,
)

logger = get_logger(__name__)


def read_metadata_json(path: Path) -> Any:
    """Read and decode a metadata file.

    Raises:
        ParserError: If the file cannot be read or is not valid JSON
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParserError(f"Failed to read '{path}': {e}", path=path) from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParserError(f"Failed to deserialize '{path}' as JSON: {e}", path=path) from e


def validate_document(data: Any, path: Path | None = None) -> MetadataDocument:
    """Validate decoded JSON against the metadata schema.

    A document carrying ``project_information`` is a project metadata file;
    anything else must be an individual metadata file.

    Raises:
        MetadataValidationError: If the data does not match either shape
    """
    if not isinstance(data, dict):
        raise MetadataValidationError(
            f"Failed to validate metadata{_where(path)}: "
            f"expected a JSON object, got {type(data).__name__}",
            path=path,
        )

    model = ProjectPairsMetadata if "project_information" in data else IndividualPairsMetadata
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MetadataValidationError(
            f"Failed to validate metadata{_where(path)}:\n{format_validation_error(e)}",
            path=path,
        ) from e


def parse_document(path: Path) -> MetadataDocument:
    """Parse a metadata file into its validated on-disk shape."""
    path = Path(path)
    document = validate_document(read_metadata_json(path), path)
    logger.debug(f"Validated {type(document).__name__} from {path}")
    return document


def parse(path: Path) -> Metadata:
    """Parse a JSON metadata file describing C-Rust program pairs.

    Args:
        path: The JSON metadata file

    Returns:
        Normalized Metadata

    Raises:
        ParserError: If the file cannot be read or decoded
        MetadataValidationError: If the content does not match the schema
    """
    return normalize(parse_document(path))


def normalize(document: MetadataDocument) -> Metadata:
    """Convert either on-disk shape into normalized Metadata."""
    if isinstance(document, ProjectPairsMetadata):
        return _normalize_project(document)
    return _normalize_individual(document)


def _normalize_individual(document: IndividualPairsMetadata) -> Metadata:
    pairs = [
        ProgramPair(
            program_name=pair.program_name,
            program_description=pair.program_description,
            translation_tools=list(pair.translation_tools),
            feature_relationship=pair.feature_relationship,
            c_program=Program(
                language=Language.C,
                documentation_url=pair.c_program.documentation_url,
                repository_url=pair.c_program.repository_url,
                source_paths=list(pair.c_program.source_paths),
            ),
            rust_program=Program(
                language=Language.RUST,
                documentation_url=pair.rust_program.documentation_url,
                repository_url=pair.rust_program.repository_url,
                source_paths=list(pair.rust_program.source_paths),
            ),
        )
        for pair in document.pairs
    ]
    return Metadata(pairs=pairs)


def _normalize_project(document: ProjectPairsMetadata) -> Metadata:
    project = document.project_information
    pairs = [
        ProgramPair(
            program_name=pair.program_name,
            program_description=pair.program_description,
            translation_tools=list(project.translation_tools),
            feature_relationship=project.feature_relationship,
            c_program=Program(
                language=Language.C,
                documentation_url=project.c_program.documentation_url,
                repository_url=project.c_program.repository_url,
                source_paths=list(pair.c_program.source_paths),
            ),
            rust_program=Program(
                language=Language.RUST,
                documentation_url=project.rust_program.documentation_url,
                repository_url=project.rust_program.repository_url,
                source_paths=list(pair.rust_program.source_paths),
            ),
        )
        for pair in document.pairs
    ]
    return Metadata(pairs=pairs)


def _where(path: Path | None) -> str:
    return f" '{path}'" if path is not None else ""
