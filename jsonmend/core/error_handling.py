"""
Common error handling utilities for JSON repair.

This module provides error context building shared by the scanner and the
parsing facade when a repaired document is still rejected.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorContext:
    """Context information for repair errors."""

    position: int
    line: int
    column: int
    context_text: str
    original_text: Optional[str] = None

    def describe(self) -> str:
        """Render the location as 'line L, column C' plus the snippet."""
        location = f"line {self.line}, column {self.column}"
        if self.context_text.strip():
            return f"{location}: {self.context_text.strip()}"
        return location


class ErrorContextBuilder:
    """Builds error context information from a position in a text."""

    @staticmethod
    def build_context(
        position: int, original_text: str, context_length: int = 50
    ) -> ErrorContext:
        """Build error context from position and original text."""
        if not original_text:
            return ErrorContext(
                position=position,
                line=1,
                column=position + 1,
                context_text="",
                original_text=original_text,
            )

        position = max(0, min(position, len(original_text)))

        # Calculate line and column
        line = original_text[:position].count("\n") + 1
        line_start = original_text.rfind("\n", 0, position) + 1
        column = position - line_start + 1

        # Extract context text
        start = max(0, position - context_length // 2)
        end = min(len(original_text), position + context_length // 2)
        context_text = original_text[start:end]

        return ErrorContext(
            position=position,
            line=line,
            column=column,
            context_text=context_text,
            original_text=original_text,
        )
