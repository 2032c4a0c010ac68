"""
Base classes for preprocessing steps.

Preprocessing steps run in the parsing facade before the recovery scanner;
the scanner itself never preprocesses its input.
"""

from ..utils.config import RepairConfig


class PreprocessingStepBase:
    """Base class for preprocessing steps with common functionality."""

    def should_apply(self, _config: RepairConfig) -> bool:
        """Default implementation - always apply. Override in subclasses."""
        return True

    def process(self, text: str, _config: RepairConfig) -> str:
        """Process the text. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement process()")
