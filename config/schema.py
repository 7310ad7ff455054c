"""Configuration schema definitions using Pydantic.

The configuration names the directories the corpus lives in and a few
tunables for cloning and source discovery. Every field has a default, so an
empty configuration describes the standard repository layout.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from utils.constants import (
    DEFAULT_CLONE_DEPTH,
    DEFAULT_CLONE_TIMEOUT_SECONDS,
    DEFAULT_MAKEFILE_NAMES,
    DEFAULT_METADATA_DIR,
    DEFAULT_PROGRAM_PAIRS_DIR,
    DEFAULT_REPOSITORY_CLONES_DIR,
    DEMO_METADATA_SUBDIR,
    INDIVIDUAL_METADATA_SUBDIR,
    PROJECT_METADATA_SUBDIR,
    REJECTED_PAIRS_FILENAME,
)


class CorpusConfig(BaseModel):
    """Corpus layout and tool settings - read-only once validated."""

    metadata_directory: Path = Field(
        default=Path(DEFAULT_METADATA_DIR),
        description="Directory holding individual/, projects/ and demo/ metadata",
    )
    program_pairs_directory: Path = Field(
        default=Path(DEFAULT_PROGRAM_PAIRS_DIR),
        description="Destination for downloaded program pairs",
    )
    repository_clones_directory: Path = Field(
        default=Path(DEFAULT_REPOSITORY_CLONES_DIR),
        description="Local cache of git clones",
    )
    rejected_pairs_file: Path = Field(
        default=Path(DEFAULT_METADATA_DIR) / REJECTED_PAIRS_FILENAME,
        description="JSON log of rejected candidate pairs (defaults to <metadata_directory>/rejected.json)",
    )
    clone_depth: int = Field(
        default=DEFAULT_CLONE_DEPTH, ge=1, description="git clone --depth"
    )
    clone_timeout: float = Field(
        default=DEFAULT_CLONE_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds before a clone is abandoned",
    )
    makefile_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MAKEFILE_NAMES),
        min_length=1,
        description="Build files scanned for <program>_SOURCES",
    )

    @model_validator(mode="before")
    @classmethod
    def default_rejected_pairs_file(cls, data: Any) -> Any:
        """The rejection log follows metadata_directory unless set explicitly."""
        if not isinstance(data, dict) or data.get("rejected_pairs_file") is not None:
            return data
        metadata_directory = data.get("metadata_directory")
        if isinstance(metadata_directory, (str, Path)):
            data = {**data, "rejected_pairs_file": Path(metadata_directory) / REJECTED_PAIRS_FILENAME}
        return data

    @field_validator("makefile_names")
    @classmethod
    def validate_makefile_names(cls, v: list[str]) -> list[str]:
        """Makefile names are bare file names."""
        cleaned = []
        for name in v:
            name = name.strip()
            if not name:
                raise ValueError("makefile names cannot be empty")
            if "/" in name or "\\" in name:
                raise ValueError(f"makefile name must not contain a path: {name}")
            cleaned.append(name)
        return cleaned

    @property
    def individual_metadata_directory(self) -> Path:
        return self.metadata_directory / INDIVIDUAL_METADATA_SUBDIR

    @property
    def project_metadata_directory(self) -> Path:
        return self.metadata_directory / PROJECT_METADATA_SUBDIR

    @property
    def demo_metadata_directory(self) -> Path:
        return self.metadata_directory / DEMO_METADATA_SUBDIR

    def metadata_directories(self, demo: bool = False) -> list[Path]:
        """Metadata directories processed by a download, in order."""
        if demo:
            return [self.demo_metadata_directory]
        return [self.project_metadata_directory, self.individual_metadata_directory]

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
