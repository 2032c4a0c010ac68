"""
Configuration and limits for jsonmend parsing.

This module defines security limits and configuration options used by the
parsing facade. The recovery scanner itself takes no configuration.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RepairLimits:
    """Security limits applied around a repair to prevent abuse."""

    max_input_size: int = 10 * 1024 * 1024
    max_nesting_depth: int = 100

    def __post_init__(self) -> None:
        if self.max_input_size <= 0:
            raise ValueError("max_input_size must be positive")
        if self.max_nesting_depth <= 0:
            raise ValueError("max_nesting_depth must be positive")


@dataclass
class ErrorReporting:
    """Error reporting and context settings."""

    include_context: bool = True
    max_error_context: int = 50


@dataclass
class RepairConfig:
    """Configuration options for jsonmend parsing."""

    limits: Optional[RepairLimits] = None
    error_reporting: Optional[ErrorReporting] = None
    extract_from_markdown: bool = True

    def __post_init__(self) -> None:
        if self.limits is None:
            self.limits = RepairLimits()
        if self.error_reporting is None:
            self.error_reporting = ErrorReporting()

    @property
    def max_input_size(self) -> int:
        """Maximum input size in characters."""
        assert self.limits is not None
        return self.limits.max_input_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum nesting depth of the repaired structure."""
        assert self.limits is not None
        return self.limits.max_nesting_depth

    @property
    def include_context(self) -> bool:
        """Whether to include a text snippet in error messages."""
        assert self.error_reporting is not None
        return self.error_reporting.include_context

    @property
    def max_error_context(self) -> int:
        """Maximum characters of context to include in errors."""
        assert self.error_reporting is not None
        return self.error_reporting.max_error_context

    @classmethod
    def strict(cls) -> "RepairConfig":
        """Create a configuration that repairs the raw text as-is."""
        return cls(extract_from_markdown=False)
