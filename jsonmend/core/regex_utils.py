"""
Safe regex utilities with timeout protection.

This module wraps the third-party ``regex`` module, whose native ``timeout``
argument guards against catastrophic backtracking on untrusted model output.
"""

import logging
from typing import Any, Optional

import regex  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 0.5


def safe_regex_search(
    pattern: str, string: str, flags: int = 0, timeout: float = DEFAULT_TIMEOUT
) -> Optional[Any]:
    """
    Perform regex search with timeout protection.

    Args:
        pattern: Regular expression pattern
        string: Input string to search
        flags: Regex flags (``regex.DOTALL``, ``regex.IGNORECASE``, ...)
        timeout: Timeout in seconds

    Returns:
        Match object if found, None if no match or timeout/error
    """
    try:
        return regex.search(pattern, string, flags=flags, timeout=timeout)
    except TimeoutError:
        logger.warning(
            f"Regex search timed out after {timeout}s on {len(string)} chars: "
            f"pattern={pattern[:50]}"
        )
        return None
    except (regex.error, ValueError, TypeError):
        return None
