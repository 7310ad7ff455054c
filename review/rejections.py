"""Log of rejected candidate pairs.

Rejected candidates are kept apart from the accepted metadata so they are
not proposed and reviewed again. The log is a single JSON file.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from config.loader import format_validation_error
from corpus.parser import parse_document
from corpus.schema import ProgramPair
from corpus.writer import MetadataWriter
from utils import get_logger

logger = get_logger(__name__)


class RejectionStoreError(Exception):
    """Raised when the rejection log cannot be read or written."""

    pass


class RejectedPair(BaseModel):
    """A candidate pair that failed manual verification."""

    program_name: str = Field(..., min_length=1)
    c_repository_url: str = ""
    rust_repository_url: str = ""
    reason: str = Field(..., min_length=1)
    rejected_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds")
    )

    @field_validator("program_name", "reason")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be blank")
        return v.strip()

    @classmethod
    def from_pair(cls, pair: ProgramPair, reason: str) -> "RejectedPair":
        return cls(
            program_name=pair.program_name,
            c_repository_url=pair.c_program.repository_url,
            rust_repository_url=pair.rust_program.repository_url,
            reason=reason,
        )

    def same_candidate(self, other: "RejectedPair") -> bool:
        return (
            self.program_name == other.program_name
            and self.c_repository_url == other.c_repository_url
            and self.rust_repository_url == other.rust_repository_url
        )


class RejectionLog(BaseModel):
    rejected_pairs: list[RejectedPair] = Field(default_factory=list)


class RejectionStore:
    """Reads and appends to the rejection log file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> RejectionLog:
        """Load the log; a missing file is an empty log.

        Raises:
            RejectionStoreError: If the file is unreadable or malformed
        """
        if not self.path.exists():
            return RejectionLog()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise RejectionStoreError(f"Failed to read '{self.path}': {e}") from e
        except json.JSONDecodeError as e:
            raise RejectionStoreError(f"Invalid JSON in '{self.path}': {e}") from e

        try:
            return RejectionLog.model_validate(data)
        except ValidationError as e:
            raise RejectionStoreError(
                f"Malformed rejection log '{self.path}':\n{format_validation_error(e)}"
            ) from e

    def save(self, log: RejectionLog) -> Path:
        content = json.dumps(log.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise RejectionStoreError(f"Failed to write '{self.path}': {e}") from e
        return self.path

    def add(self, entry: RejectedPair) -> bool:
        """Append a rejection.

        Returns:
            False without writing if the same candidate is already logged
        """
        log = self.load()
        if any(existing.same_candidate(entry) for existing in log.rejected_pairs):
            logger.info(f"'{entry.program_name}' is already in the rejection log")
            return False
        log.rejected_pairs.append(entry)
        self.save(log)
        logger.info(f"Recorded rejection of '{entry.program_name}' in {self.path}")
        return True

    def names(self) -> list[str]:
        return sorted({entry.program_name for entry in self.load().rejected_pairs})

    def find(self, program_name: str) -> list[RejectedPair]:
        return [entry for entry in self.load().rejected_pairs if entry.program_name == program_name]


def remove_pair_from_metadata(
    metadata_file: Path, program_name: str, writer: MetadataWriter | None = None
) -> Path:
    """Drop a rejected pair from an accepted metadata file.

    Raises:
        ParserError: If the metadata file is invalid
        KeyError: If the file has no pair with that name
        RejectionStoreError: If the pair is the only one in the file
        WriterError: If the file cannot be written back
    """
    document = parse_document(metadata_file)
    remaining = [pair for pair in document.pairs if pair.program_name != program_name]
    if len(remaining) == len(document.pairs):
        raise KeyError(f"No pair named '{program_name}' in {metadata_file}")
    if not remaining:
        raise RejectionStoreError(
            f"'{program_name}' is the only pair in {metadata_file}; delete the file instead"
        )

    document.pairs = remaining
    (writer or MetadataWriter()).write(document, metadata_file, overwrite=True)
    logger.info(f"Removed '{program_name}' from {metadata_file}")
    return Path(metadata_file)
