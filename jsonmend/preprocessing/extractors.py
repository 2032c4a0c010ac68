"""
Content extraction preprocessing steps.

This module contains preprocessing steps that pull JSON content out of the
markdown model responses usually wrap it in.
"""

from typing import Optional

import regex  # type: ignore[import-untyped]

from ..core.regex_utils import safe_regex_search
from ..utils.config import RepairConfig
from .base import PreprocessingStepBase

FENCED_BLOCK_PATTERN = r"```(?:json|javascript|js)?[ \t]*\n?(.*?)\n?[ \t]*```"


class MarkdownExtractor(PreprocessingStepBase):
    """Extracts JSON from a fenced markdown code block."""

    def should_apply(self, config: RepairConfig) -> bool:
        """Apply if markdown extraction is enabled."""
        return config.extract_from_markdown

    def process(self, text: str, _config: RepairConfig) -> str:
        """Extract JSON from the first complete fenced code block."""
        span = self.locate_code_block(text)
        if span is None:
            return text
        start, end = span
        return text[start:end]

    @staticmethod
    def locate_code_block(text: str) -> Optional[tuple[int, int]]:
        """Return the (start, end) span of the first fenced block's content.

        Surrounding whitespace is excluded from the span. None is returned
        for an empty block or when no complete fence exists; an unterminated
        fence is left alone because the scanner skips the opening marker on
        its own.
        """
        if "```" not in text:
            return None

        match = safe_regex_search(
            FENCED_BLOCK_PATTERN, text, regex.DOTALL | regex.IGNORECASE
        )
        if not match:
            return None

        content = match.group(1)
        start = match.start(1) + len(content) - len(content.lstrip())
        end = match.end(1) - (len(content) - len(content.rstrip()))
        if start >= end:
            return None
        return start, end
