"""
Single-pass recovery scanner for truncated or noisy JSON documents.

The scanner walks the raw text exactly once and builds a repaired copy:

- Everything before the first ``{`` or ``[`` is discarded.
- Raw newlines, carriage returns and tabs inside strings become their
  two-character escapes; other control characters inside strings are dropped.
- A closing token that does not match the innermost open structure (or
  arrives with nothing open) is dropped instead of failing the scan.
- Scanning stops as soon as the first top-level structure closes; trailing
  prose, code-fence markers or a second document are never looked at.
- If the input ends with structures still open, the string in progress is
  closed (minus any half-written escape such as a lone backslash or a partial
  ``\\uXXXX``), a dangling ``,`` is removed, a key left without a value gets
  ``null``, and the missing closers are appended innermost first.

Dropping mismatched closers is lenient on purpose: the goal is to salvage as
much of a model's answer as possible, so do not tighten it into a hard error.

The repaired text is verified with :func:`json.loads`. Anything still
rejected (bad literals, a key cut off before its colon, invalid escapes) is
reported as :class:`RepairExhausted`, and so is a document nested deeper than
the strict parser can recurse.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..security.exceptions import NoStructureFound, RepairExhausted
from ..security.limits import LimitValidator
from ..utils.config import ErrorReporting, RepairLimits
from .constants import (
    CLOSERS,
    CLOSING_TOKEN,
    CONTROL_ESCAPE_MAP,
    ESCAPE,
    FIRST_PRINTABLE,
    HEX_DIGITS,
    ITEM_SEPARATOR,
    KEY_SEPARATOR,
    NULL_LITERAL,
    OPENERS,
    QUOTE,
    UNICODE_ESCAPE,
    Delimiter,
)


class ScanState(Enum):
    """Where the cursor currently sits relative to string literals."""

    OUTSIDE = "outside"
    IN_STRING = "in_string"


@dataclass(frozen=True)
class RepairResult:
    """Outcome of a repair: the repaired text, its value and what was done."""

    text: str
    value: Any
    skipped_prefix: int = 0
    skipped_suffix: int = 0
    dropped_closers: int = 0
    escaped_controls: int = 0
    dropped_controls: int = 0
    truncated: bool = False
    appended: str = ""
    max_depth: int = 0

    @property
    def changed(self) -> bool:
        """Whether the repaired text differs from the input."""
        return bool(
            self.skipped_prefix
            or self.skipped_suffix
            or self.dropped_closers
            or self.escaped_controls
            or self.dropped_controls
            or self.truncated
        )

    def summary(self) -> str:
        """Short human readable description of the repair actions."""
        actions = []
        if self.skipped_prefix:
            actions.append(f"skipped {self.skipped_prefix} leading chars")
        if self.skipped_suffix:
            actions.append(f"discarded {self.skipped_suffix} trailing chars")
        if self.dropped_closers:
            actions.append(f"dropped {self.dropped_closers} stray closers")
        if self.escaped_controls:
            actions.append(f"escaped {self.escaped_controls} control chars")
        if self.dropped_controls:
            actions.append(f"dropped {self.dropped_controls} control chars")
        if self.truncated:
            actions.append(f"appended {self.appended!r}")
        return ", ".join(actions) if actions else "no changes"


class Scanner:
    """Recovery state machine owned by a single repair call."""

    def __init__(
        self,
        text: str,
        error_reporting: Optional[ErrorReporting] = None,
        limits: Optional[RepairLimits] = None,
    ):
        self.text = text
        self.error_reporting = error_reporting or ErrorReporting()
        self.limits = limits

        self.state = ScanState.OUTSIDE
        self.escaped = False
        self.escape_start = 0
        self.pending_hex = 0
        self.started = False
        self.stack: list[Delimiter] = []
        self.buffer: list[str] = []

        self.skipped_prefix = 0
        self.dropped_closers = 0
        self.escaped_controls = 0
        self.dropped_controls = 0
        self.max_depth = 0

    def scan(self) -> RepairResult:
        """Run the scan, repair truncation and verify the result."""
        consumed = len(self.text)
        for index, char in enumerate(self.text):
            if self.state is ScanState.IN_STRING:
                self._scan_string_char(char)
            elif self._scan_outside_char(char):
                consumed = index + 1
                break

        if not self.started:
            raise NoStructureFound(self.text)

        truncated = bool(self.stack)
        if truncated:
            repaired, appended = self._close_truncated()
        else:
            repaired, appended = "".join(self.buffer), ""

        if self.limits is not None:
            LimitValidator(self.limits).validate_nesting_depth(self.max_depth)

        try:
            value = json.loads(repaired)
        except json.JSONDecodeError as e:
            raise self._exhausted(repaired, e) from e
        except RecursionError as e:
            cause = json.JSONDecodeError(
                f"Nesting depth {self.max_depth} too deep to parse", repaired, 0
            )
            raise self._exhausted(repaired, cause) from e

        return RepairResult(
            text=repaired,
            value=value,
            skipped_prefix=self.skipped_prefix,
            skipped_suffix=len(self.text) - consumed,
            dropped_closers=self.dropped_closers,
            escaped_controls=self.escaped_controls,
            dropped_controls=self.dropped_controls,
            truncated=truncated,
            appended=appended,
            max_depth=self.max_depth,
        )

    def _exhausted(
        self, repaired: str, cause: json.JSONDecodeError
    ) -> RepairExhausted:
        return RepairExhausted(
            self.text,
            repaired,
            cause,
            include_context=self.error_reporting.include_context,
            max_error_context=self.error_reporting.max_error_context,
        )

    def _scan_string_char(self, char: str) -> None:
        if self.pending_hex:
            if char in HEX_DIGITS:
                self.buffer.append(char)
                self.pending_hex -= 1
                return
            # Malformed \u escape, left for the strict parser to reject
            self.pending_hex = 0

        if self.escaped:
            # Second half of an escape sequence passes through untouched
            self.buffer.append(char)
            self.escaped = False
            if char == UNICODE_ESCAPE:
                self.pending_hex = 4
        elif char == ESCAPE:
            self.escape_start = len(self.buffer)
            self.buffer.append(char)
            self.escaped = True
        elif char == QUOTE:
            self.buffer.append(char)
            self.state = ScanState.OUTSIDE
        elif char in CONTROL_ESCAPE_MAP:
            self.buffer.append(CONTROL_ESCAPE_MAP[char])
            self.escaped_controls += 1
        elif ord(char) < FIRST_PRINTABLE:
            self.dropped_controls += 1
        else:
            self.buffer.append(char)

    def _scan_outside_char(self, char: str) -> bool:
        """Consume one character outside strings. Returns True to stop."""
        if char in OPENERS:
            self.buffer.append(char)
            self.stack.append(OPENERS[char])
            self.started = True
            self.max_depth = max(self.max_depth, len(self.stack))
            return False

        if not self.started:
            self.skipped_prefix += 1
            return False

        if char in CLOSERS:
            if not self.stack or self.stack[-1] is not CLOSERS[char]:
                self.dropped_closers += 1
                return False
            self.stack.pop()
            self.buffer.append(char)
            return not self.stack

        if char == QUOTE:
            self.state = ScanState.IN_STRING
        self.buffer.append(char)
        return False

    def _close_truncated(self) -> tuple[str, str]:
        """Balance a document cut off mid-structure.

        Returns the completed text and the suffix that was synthesized.
        """
        appended = []

        if self.state is ScanState.IN_STRING:
            if self.escaped or self.pending_hex:
                # An escape sequence cannot be completed from nothing
                del self.buffer[self.escape_start:]
                self.escaped = False
                self.pending_hex = 0
            appended.append(QUOTE)
            self.state = ScanState.OUTSIDE
            repaired = "".join(self.buffer)
        else:
            repaired = "".join(self.buffer)
            stripped = repaired.rstrip()
            if stripped.endswith(ITEM_SEPARATOR):
                repaired = stripped[: -len(ITEM_SEPARATOR)]

            if repaired.rstrip().endswith(KEY_SEPARATOR):
                appended.append(NULL_LITERAL)

        while self.stack:
            appended.append(CLOSING_TOKEN[self.stack.pop()])

        suffix = "".join(appended)
        return repaired + suffix, suffix


def repair_with_report(raw_text: str) -> RepairResult:
    """
    Repair raw model output and describe what was changed.

    Args:
        raw_text: Untrusted text expected to contain a JSON object or array

    Returns:
        RepairResult with the repaired text and its parsed value

    Raises:
        NoStructureFound: If the text has no opening '{' or '['
        RepairExhausted: If the balanced text is still not valid JSON
    """
    return Scanner(raw_text).scan()


def repair(raw_text: str) -> str:
    """
    Repair raw model output into a strictly valid JSON document.

    Args:
        raw_text: Untrusted text expected to contain a JSON object or array

    Returns:
        Text that json.loads accepts

    Raises:
        NoStructureFound: If the text has no opening '{' or '['
        RepairExhausted: If the balanced text is still not valid JSON
    """
    return repair_with_report(raw_text).text
