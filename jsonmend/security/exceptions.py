"""
Exception hierarchy for jsonmend.

RepairError subclasses double as ValueError so code written against
json.loads (whose JSONDecodeError is a ValueError) keeps catching them.
"""

import json

from ..core.error_handling import ErrorContext, ErrorContextBuilder


class JsonMendError(Exception):
    """Base class for all jsonmend errors."""


class SecurityError(JsonMendError):
    """Raised when a configured security limit is exceeded."""


class RepairError(JsonMendError, ValueError):
    """Raised when raw text cannot be turned into a valid document."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class NoStructureFound(RepairError):
    """The input never contained an opening object or list token."""

    def __init__(self, raw_text: str = ""):
        preview = raw_text[:40] + "..." if len(raw_text) > 40 else raw_text
        super().__init__(
            f"No opening '{{' or '[' found in input: {preview!r}", raw_text
        )


class RepairExhausted(RepairError):
    """The balanced output is still rejected by the strict parser."""

    def __init__(
        self,
        raw_text: str,
        repaired_text: str,
        cause: json.JSONDecodeError,
        include_context: bool = True,
        max_error_context: int = 50,
    ):
        self.repaired_text = repaired_text
        self.cause = cause
        self.context: ErrorContext = ErrorContextBuilder.build_context(
            cause.pos, repaired_text, max_error_context
        )

        message = f"Repaired text still invalid: {cause.msg}"
        if include_context:
            message += f" at {self.context.describe()}"
        else:
            message += f" at line {self.context.line}, column {self.context.column}"
        super().__init__(message, raw_text)
