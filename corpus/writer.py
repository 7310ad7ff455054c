"""Metadata writer.

This module writes metadata documents to disk as JSON files.

All writes are:
- Deterministic (2-space indentation, schema field order, trailing newline)
- Safe (never overwrites unless explicitly allowed)
- Atomic per file (content goes to a temporary sibling that is then renamed)
"""

import json
import os
from pathlib import Path
from typing import Union

from utils import get_logger

from .errors import WriterError
from .schema import Metadata, MetadataDocument

logger = get_logger(__name__)


def render_document(document: Union[MetadataDocument, Metadata]) -> str:
    """Render a metadata document as the JSON text written to disk."""
    if isinstance(document, Metadata):
        document = document.to_document()
    data = document.model_dump(mode="json")
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class MetadataWriter:
    """Writes metadata documents to disk."""

    def write(
        self,
        document: Union[MetadataDocument, Metadata],
        path: Path,
        overwrite: bool = False,
    ) -> Path:
        """Write a metadata document as JSON.

        Normalized ``Metadata`` is written in the individual shape.

        Args:
            document: Document to write
            path: Destination file
            overwrite: If True, replaces an existing file. Defaults to False.

        Returns:
            Path to the written file

        Raises:
            FileExistsError: If file exists and overwrite is False
            WriterError: If the directory or file cannot be written
        """
        path = Path(path)
        if path.exists() and not overwrite:
            raise FileExistsError(
                f"Metadata file already exists: {path}. Set overwrite=True to overwrite."
            )

        content = render_document(document)
        temporary = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temporary.write_text(content, encoding="utf-8")
            os.replace(temporary, path)
        except OSError as e:
            logger.error(f"Failed to write metadata to {path}: {e}")
            if temporary.exists():
                temporary.unlink()
            raise WriterError(f"Failed to write metadata to '{path}': {e}") from e

        logger.info(f"Metadata written to: {path}")
        return path
