"""Metadata schemas for C-Rust program pairs.

Two families of models live here:

- The on-disk shapes of metadata files, validated strictly with Pydantic.
  *Individual* files list self-contained pairs; *project* files share
  repository information across all pairs in ``project_information``.
- The normalized shape (``Metadata`` / ``ProgramPair`` / ``Program``) that
  the rest of the tool works with, regardless of which file shape a pair
  came from.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.file_helpers import is_safe_relative_path


class Language(str, Enum):
    """The language in which a program is written."""

    C = "c"
    RUST = "rust"


class FeatureRelationship(str, Enum):
    """Feature set of the Rust program in relation to its C counterpart."""

    RUST_SUBSET_OF_C = "rust_subset_of_c"
    RUST_EQUIVALENT_TO_C = "rust_equivalent_to_c"
    RUST_SUPERSET_OF_C = "rust_superset_of_c"
    OVERLAPPING = "overlapping"


_STRICT = ConfigDict(extra="forbid")


def _check_program_name(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("program_name cannot be empty")
    if v != v.strip():
        raise ValueError("program_name must not have surrounding whitespace")
    if "/" in v or "\\" in v or v == "." or ".." in v:
        raise ValueError(f"program_name must be usable as a directory name: {v!r}")
    return v


def _check_source_paths(v: list[str]) -> list[str]:
    for path in v:
        if not is_safe_relative_path(path):
            raise ValueError(f"source path must be relative and inside the repository: {path!r}")
    return v


# --- On-disk shapes -------------------------------------------------------


class RepositoryInfo(BaseModel):
    """Where a program lives and where it is documented."""

    documentation_url: str = Field(..., description="Program documentation")
    repository_url: str = Field(..., min_length=1, description="Git URL to clone")

    @field_validator("repository_url")
    @classmethod
    def validate_repository_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("repository_url cannot be empty")
        return v.strip()

    model_config = _STRICT


class SourcePaths(BaseModel):
    """Source files or directories of one program, relative to its repository."""

    source_paths: list[str] = Field(..., min_length=1)

    @field_validator("source_paths")
    @classmethod
    def validate_source_paths(cls, v: list[str]) -> list[str]:
        return _check_source_paths(v)

    model_config = _STRICT


class ProgramInfo(RepositoryInfo):
    """A fully described program, as used by individual metadata."""

    source_paths: list[str] = Field(..., min_length=1)

    @field_validator("source_paths")
    @classmethod
    def validate_source_paths(cls, v: list[str]) -> list[str]:
        return _check_source_paths(v)


class IndividualProgramPair(BaseModel):
    """One self-contained pair in an individual metadata file."""

    program_name: str
    program_description: str
    translation_tools: list[str] = Field(default_factory=list)
    feature_relationship: FeatureRelationship
    c_program: ProgramInfo
    rust_program: ProgramInfo

    @field_validator("program_name")
    @classmethod
    def validate_program_name(cls, v: str) -> str:
        return _check_program_name(v)

    model_config = _STRICT


class IndividualPairsMetadata(BaseModel):
    """Metadata file listing independent program pairs."""

    pairs: list[IndividualProgramPair] = Field(..., min_length=1)

    model_config = _STRICT


class ProjectInformation(BaseModel):
    """Information shared by every pair of a project metadata file."""

    translation_tools: list[str] = Field(default_factory=list)
    feature_relationship: FeatureRelationship
    c_program: RepositoryInfo
    rust_program: RepositoryInfo

    model_config = _STRICT


class ProjectProgramPair(BaseModel):
    """One pair in a project metadata file; repositories come from the project."""

    program_name: str
    program_description: str
    c_program: SourcePaths
    rust_program: SourcePaths

    @field_validator("program_name")
    @classmethod
    def validate_program_name(cls, v: str) -> str:
        return _check_program_name(v)

    model_config = _STRICT


class ProjectPairsMetadata(BaseModel):
    """Metadata file for a project that rewrites many programs at once."""

    project_information: ProjectInformation
    pairs: list[ProjectProgramPair] = Field(..., min_length=1)

    model_config = _STRICT


MetadataDocument = Union[IndividualPairsMetadata, ProjectPairsMetadata]


# --- Normalized shape -----------------------------------------------------


class Program(BaseModel):
    """One C or Rust program."""

    language: Language
    documentation_url: str
    repository_url: str
    source_paths: list[str]


class ProgramPair(BaseModel):
    """One C-Rust program pair."""

    program_name: str
    program_description: str
    translation_tools: list[str]
    feature_relationship: FeatureRelationship
    c_program: Program
    rust_program: Program

    def program(self, language: Language) -> Program:
        return self.c_program if language == Language.C else self.rust_program


class Metadata(BaseModel):
    """The program pairs of a single metadata file."""

    pairs: list[ProgramPair] = Field(default_factory=list)

    def program_names(self) -> list[str]:
        return [pair.program_name for pair in self.pairs]

    def to_document(self) -> IndividualPairsMetadata:
        """Convert back to the individual on-disk shape."""
        return IndividualPairsMetadata(
            pairs=[
                IndividualProgramPair(
                    program_name=pair.program_name,
                    program_description=pair.program_description,
                    translation_tools=list(pair.translation_tools),
                    feature_relationship=pair.feature_relationship,
                    c_program=_to_program_info(pair.c_program),
                    rust_program=_to_program_info(pair.rust_program),
                )
                for pair in self.pairs
            ]
        )


def _to_program_info(program: Program) -> ProgramInfo:
    return ProgramInfo(
        documentation_url=program.documentation_url,
        repository_url=program.repository_url,
        source_paths=list(program.source_paths),
    )
