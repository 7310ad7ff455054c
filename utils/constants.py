"""Constants for PairCorpus.

This module defines shared constants used across the application.
"""

# Exit codes (matching CLI exit codes)
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_RUNTIME_ERROR = 2

# Application metadata
APP_NAME = "PairCorpus"
APP_VERSION = "0.3.0"

# Supported file formats
SUPPORTED_CONFIG_FORMATS = ["yaml", "yml", "json"]
SUPPORTED_CATALOG_FORMATS = ["csv", "json"]

# Default locations, relative to the working directory
DEFAULT_METADATA_DIR = "metadata"
DEFAULT_PROGRAM_PAIRS_DIR = "program_pairs"
DEFAULT_REPOSITORY_CLONES_DIR = "repository_clones"
REJECTED_PAIRS_FILENAME = "rejected.json"

# Subdirectories of the metadata directory
INDIVIDUAL_METADATA_SUBDIR = "individual"
PROJECT_METADATA_SUBDIR = "projects"
DEMO_METADATA_SUBDIR = "demo"

# Destination directories inside program_pairs/<program_name>/
C_PROGRAM_DIR = "c-program"
RUST_PROGRAM_DIR = "rust-program"

# Build files that list a program's sources
DEFAULT_MAKEFILE_NAMES = ["Makefile.am", "local.mk", "Makemodule.am"]

# Git
DEFAULT_CLONE_DEPTH = 1
DEFAULT_CLONE_TIMEOUT_SECONDS = 600.0
