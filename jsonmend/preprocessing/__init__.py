"""
JSON preprocessing module.

Steps that prepare raw model output before it reaches the recovery scanner.
"""

from .base import PreprocessingStepBase
from .extractors import MarkdownExtractor

__all__ = [
    "PreprocessingStepBase",
    "MarkdownExtractor",
]
