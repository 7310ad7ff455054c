"""Corpus configuration: schema and YAML/JSON loader."""

from .loader import (
    ConfigError,
    format_validation_error,
    load_config,
    load_config_file,
    validate_config,
)
from .schema import CorpusConfig

__all__ = [
    "ConfigError",
    "CorpusConfig",
    "format_validation_error",
    "load_config",
    "load_config_file",
    "validate_config",
]
