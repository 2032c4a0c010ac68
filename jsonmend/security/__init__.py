"""
jsonmend Security and Validation System.

This module provides security limits and exception handling.
"""

from .exceptions import (
    JsonMendError,
    NoStructureFound,
    RepairError,
    RepairExhausted,
    SecurityError,
)
from .limits import LimitValidator

__all__ = [
    'JsonMendError', 'RepairError', 'NoStructureFound', 'RepairExhausted',
    'SecurityError', 'LimitValidator'
]
