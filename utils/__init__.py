"""Shared utilities for PairCorpus.

This module provides common utilities used across the application.
"""

from .constants import (
    APP_NAME,
    APP_VERSION,
    EXIT_INVALID_INPUT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    SUPPORTED_CATALOG_FORMATS,
    SUPPORTED_CONFIG_FORMATS,
)
from .file_helpers import (
    PathValidationError,
    copy_directory_contents,
    count_files,
    get_file_extension,
    get_repository_name,
    is_safe_relative_path,
    is_supported_catalog_format,
    is_supported_config_format,
    remove_directory,
    validate_path_safe,
)
from .llm_client import LLMClientWrapper, get_llm_client
from .logging import get_logger, setup_logging
from .prompt_sanitizer import (
    PromptSanitizationError,
    sanitize_json_for_prompt,
    sanitize_name,
    sanitize_string_for_prompt,
)
from .rate_limiter import RateLimitError, RateLimiter, get_rate_limiter

__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "EXIT_INVALID_INPUT",
    "EXIT_RUNTIME_ERROR",
    "EXIT_SUCCESS",
    "SUPPORTED_CATALOG_FORMATS",
    "SUPPORTED_CONFIG_FORMATS",
    "LLMClientWrapper",
    "PathValidationError",
    "PromptSanitizationError",
    "RateLimitError",
    "RateLimiter",
    "copy_directory_contents",
    "count_files",
    "get_file_extension",
    "get_llm_client",
    "get_logger",
    "get_rate_limiter",
    "get_repository_name",
    "is_safe_relative_path",
    "is_supported_catalog_format",
    "is_supported_config_format",
    "remove_directory",
    "sanitize_json_for_prompt",
    "sanitize_name",
    "sanitize_string_for_prompt",
    "setup_logging",
    "validate_path_safe",
]
