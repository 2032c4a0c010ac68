"""
jsonmend Core Repair Engine.

This module provides the recovery scanner and the parsing facade built on it.
"""

from .engine import load, loads, loads_with_report
from .scanner import RepairResult, Scanner, ScanState, repair, repair_with_report

__all__ = [
    'repair', 'repair_with_report', 'Scanner', 'ScanState', 'RepairResult',
    'loads', 'load', 'loads_with_report'
]
