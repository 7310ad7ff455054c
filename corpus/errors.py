"""Error types raised by the corpus package."""

from pathlib import Path
from typing import Optional


class ParserError(Exception):
    """Raised when a metadata file cannot be read or decoded."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class MetadataValidationError(ParserError):
    """Raised when a metadata file does not conform to the metadata schema."""

    pass


class WriterError(Exception):
    """Raised when a metadata file cannot be written."""

    pass


class DownloaderError(Exception):
    """Raised when a program pair cannot be downloaded.

    Covers both local failures (reading metadata directories, creating
    destination directories, copying files) and repository access.
    """

    pass


class CloneError(DownloaderError):
    """Raised when ``git clone`` fails or times out."""

    def __init__(self, message: str, repository_url: str):
        super().__init__(message)
        self.repository_url = repository_url
