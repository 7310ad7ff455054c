"""Prompt sanitization utilities.

Metadata entries are written by hand and candidate names come back from an
LLM, so every value interpolated into a review or discovery prompt is
passed through these helpers first.
"""

import json
import re
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)

INJECTION_PATTERNS = [
    r"(?i)ignore\s+(previous|above|all)\s+instructions?",
    r"(?i)forget\s+(previous|above|all)\s+instructions?",
    r"(?i)system\s*:",
    r"(?i)assistant\s*:",
    r"(?i)user\s*:",
    r"(?i)new\s+instructions?",
]


class PromptSanitizationError(Exception):
    """Raised when prompt sanitization fails."""

    pass


def sanitize_string_for_prompt(text: str, max_length: int = 10000) -> str:
    """Sanitize a string for safe inclusion in LLM prompts.

    Truncates to ``max_length``, drops control characters other than
    newlines and tabs, and defuses common prompt injection phrases.

    Args:
        text: String to sanitize
        max_length: Maximum length (default: 10000)

    Returns:
        Sanitized string safe for prompt inclusion
    """
    if not isinstance(text, str):
        text = str(text)

    if len(text) > max_length:
        logger.warning(f"String truncated from {len(text)} to {max_length} characters")
        text = text[:max_length]

    sanitized = "".join(c for c in text if c.isprintable() or c in ["\n", "\t"])

    for pattern in INJECTION_PATTERNS:
        sanitized = re.sub(pattern, lambda m: f"[sanitized: {m.group(0)}]", sanitized)

    return sanitized


def sanitize_name(name: str, max_length: int = 200) -> str:
    """Sanitize a short single-line value such as a program name or URL.

    Args:
        name: Value to sanitize

    Returns:
        Printable, single-line value of at most ``max_length`` characters
    """
    if not isinstance(name, str):
        name = str(name)

    sanitized = "".join(c for c in name if c.isprintable()).strip()

    if len(sanitized) > max_length:
        logger.warning(f"Value truncated from {len(sanitized)} to {max_length} characters")
        sanitized = sanitized[:max_length]

    return sanitize_string_for_prompt(sanitized, max_length=max_length * 2)


def sanitize_json_for_prompt(data: Any, max_string_length: int = 5000) -> str:
    """Sanitize data and convert to JSON string for prompt inclusion.

    Args:
        data: Data to convert to JSON (dict, list, etc.)
        max_string_length: Maximum length for string values in JSON

    Returns:
        Sanitized JSON string safe for prompt inclusion

    Raises:
        PromptSanitizationError: If data cannot be serialized
    """

    def sanitize_value(value: Any) -> Any:
        if isinstance(value, str):
            return sanitize_string_for_prompt(value, max_length=max_string_length)
        elif isinstance(value, dict):
            return {str(k): sanitize_value(v) for k, v in value.items()}
        elif isinstance(value, (list, tuple, set)):
            return [sanitize_value(item) for item in value]
        elif isinstance(value, (int, float, bool)) or value is None:
            return value
        else:
            return sanitize_string_for_prompt(str(value), max_length=max_string_length)

    try:
        return json.dumps(sanitize_value(data), indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise PromptSanitizationError(f"Failed to sanitize data for prompt: {e}") from e
