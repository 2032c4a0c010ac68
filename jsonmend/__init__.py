"""
jsonmend - salvage the JSON payload from truncated or noisy model output.

Language models asked for a single JSON document often stop mid-answer, wrap
the document in prose or code fences, or leave stray brackets behind.
jsonmend repairs such text in one pass so a strict parser accepts it.

Key Features:
- repair(): raw text in, strictly valid JSON text out
- Discards prose and fences around the first object or array
- Escapes raw newlines/tabs inside strings, drops other control characters
- Closes strings and structures cut off by a token budget
- loads()/load(): json-style API with a strict fast path

Quick Start:
    import jsonmend
    jsonmend.repair('Sure! {"summary": "Intro to OS')
    # '{"summary": "Intro to OS"}'

    data = jsonmend.loads('```json\\n[{"q": "a"}, {"q": "b"\\n```')

    # Inspect what was changed
    report = jsonmend.loads_with_report(raw_response)
    print(report.summary())
"""

from .core.engine import load, loads, loads_with_report
from .core.scanner import RepairResult, repair, repair_with_report
from .security.exceptions import (
    JsonMendError,
    NoStructureFound,
    RepairError,
    RepairExhausted,
    SecurityError,
)
from .utils.config import ErrorReporting, RepairConfig, RepairLimits

__version__ = "0.1.0"
__author__ = "jsonmend contributors"

__all__ = [
    # Repair functions
    "repair", "repair_with_report", "RepairResult",
    # json-style functions
    "loads", "load", "loads_with_report",
    # Configuration classes
    "RepairConfig", "RepairLimits", "ErrorReporting",
    # Exception classes
    "JsonMendError", "RepairError", "NoStructureFound", "RepairExhausted",
    "SecurityError",
]
