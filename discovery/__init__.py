"""Source discovery: find a C program's files and record them in metadata."""

from .makefile import (
    canonical_program_name,
    normalize_makefile,
    parse_sources,
    sources_from_makefile,
)
from .sources import SourceIndex, collect_source_files, find_files, get_c_source_files
from .updater import UpdateReport, update_metadata_file

__all__ = [
    "SourceIndex",
    "UpdateReport",
    "canonical_program_name",
    "collect_source_files",
    "find_files",
    "get_c_source_files",
    "normalize_makefile",
    "parse_sources",
    "sources_from_makefile",
    "update_metadata_file",
]
