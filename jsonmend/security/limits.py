"""
Security limits and validation for jsonmend.
This module provides security validation to prevent resource exhaustion attacks.
"""

from ..utils.config import RepairLimits
from .exceptions import SecurityError


class LimitValidator:
    """Validates repair limits to prevent resource exhaustion attacks."""

    def __init__(self, limits: RepairLimits):
        self.limits = limits

    def validate_input_size(self, text: str) -> None:
        """Validate that input text size is within limits."""
        if len(text) > self.limits.max_input_size:
            raise SecurityError(
                f"Input size {len(text)} exceeds limit {self.limits.max_input_size}"
            )

    def validate_nesting_depth(self, depth: int) -> None:
        """Validate that a structure's nesting depth is within limits."""
        if depth > self.limits.max_nesting_depth:
            raise SecurityError(
                f"Nesting depth {depth} exceeds limit "
                f"{self.limits.max_nesting_depth}"
            )
