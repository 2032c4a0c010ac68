"""
Test cases for the recovery scanner.

Tests cover string mode handling, closer matching, early stop after the first
top-level structure, truncation repair and the failure modes.
"""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from jsonmend.core.scanner import (
    RepairResult,
    Scanner,
    ScanState,
    repair,
    repair_with_report,
)
from jsonmend.security.exceptions import (
    JsonMendError,
    NoStructureFound,
    RepairExhausted,
    SecurityError,
)
from jsonmend.utils.config import ErrorReporting, RepairLimits

# Far deeper than json.loads can recurse
DEEP = 100_000


class TestConcreteScenarios:
    """Inputs with known exact outputs."""

    def test_truncated_mid_string_mid_object(self) -> None:
        """Raw newline is escaped, the string and the object are closed."""
        raw = '{"summary": "Intro to OS\nThe kernel is'
        repaired = repair(raw)

        assert repaired == '{"summary": "Intro to OS\\nThe kernel is"}'
        value = json.loads(repaired)
        assert list(value) == ["summary"]
        assert value["summary"].endswith("The kernel is")

    def test_two_open_structures_closed_innermost_first(self) -> None:
        assert repair('[{"q":"a"},{"q":"b"') == '[{"q":"a"},{"q":"b"}]'

    def test_trailing_garbage_discarded(self) -> None:
        assert repair('{"a":1}   garbage after') == '{"a":1}'


class TestLeadingContent:
    """Content before the first opening token."""

    def test_leading_prose_skipped(self) -> None:
        result = repair_with_report('Here you go: {"a": 1}')
        assert result.text == '{"a": 1}'
        assert result.skipped_prefix == len("Here you go: ")

    def test_code_fence_markers_skipped(self) -> None:
        result = repair_with_report('```json\n{"a": [1, 2]}\n```')
        assert result.text == '{"a": [1, 2]}'
        assert result.skipped_suffix == len("\n```")

    def test_quotes_before_structure_ignored(self) -> None:
        """A quote in the preamble must not open string mode."""
        assert repair('The "answer" is: ["x"]') == '["x"]'

    def test_closer_before_structure_skipped(self) -> None:
        result = repair_with_report(']) {"a":1}')
        assert result.text == '{"a":1}'
        assert result.dropped_closers == 0
        assert result.skipped_prefix == 3

    def test_unterminated_fence(self) -> None:
        assert repair('```json\n{"cards": [{"front": "CPU"') == (
            '{"cards": [{"front": "CPU"}]}'
        )


class TestStringMode:
    """Character handling inside string literals."""

    def test_closers_inside_string_kept(self) -> None:
        assert repair('{"a": "x}]y"}') == '{"a": "x}]y"}'

    def test_escaped_quote_does_not_end_string(self) -> None:
        raw = '{"a": "say \\"hi\\""}'
        assert repair(raw) == raw
        assert json.loads(repair(raw)) == {"a": 'say "hi"'}

    def test_escaped_backslash_before_quote(self) -> None:
        raw = '{"path": "C:\\\\"}'
        assert repair(raw) == raw
        assert json.loads(repair(raw)) == {"path": "C:\\"}

    def test_raw_tab_escaped(self) -> None:
        result = repair_with_report('{"a": "x\ty"}')
        assert result.text == '{"a": "x\\ty"}'
        assert result.value == {"a": "x\ty"}
        assert result.escaped_controls == 1

    def test_raw_carriage_return_and_newline_escaped(self) -> None:
        result = repair_with_report('{"a": "one\r\ntwo"}')
        assert result.text == '{"a": "one\\r\\ntwo"}'
        assert result.escaped_controls == 2

    def test_other_control_characters_dropped(self) -> None:
        result = repair_with_report('{"a": "x\x07y\x00z"}')
        assert result.text == '{"a": "xyz"}'
        assert result.dropped_controls == 2

    def test_delete_character_kept(self) -> None:
        assert repair('{"a": "x\x7fy"}') == '{"a": "x\x7fy"}'

    def test_unicode_escape_passes_through(self) -> None:
        raw = '{"a": "caf\\u00e9"}'
        assert repair(raw) == raw
        assert json.loads(repair(raw)) == {"a": "café"}

    def test_non_ascii_text_kept(self) -> None:
        assert repair('{"name": "café 🎉"') == '{"name": "café 🎉"}'

    def test_whitespace_outside_strings_kept(self) -> None:
        raw = '{\n  "a": 1,\n\t"b": 2\n}'
        assert repair(raw) == raw


class TestCloserMatching:
    """Mismatched and surplus closing tokens."""

    def test_mismatched_closer_dropped(self) -> None:
        result = repair_with_report('{"a": [1, 2}]}')
        assert result.text == '{"a": [1, 2]}'
        assert result.dropped_closers == 1

    def test_several_mismatched_closers_dropped(self) -> None:
        result = repair_with_report('[{"a": 1]}]')
        assert result.text == '[{"a": 1}]'
        assert result.dropped_closers == 1

    def test_scan_stops_after_first_structure(self) -> None:
        result = repair_with_report('{"a": 1}{"b": 2}')
        assert result.text == '{"a": 1}'
        assert result.skipped_suffix == len('{"b": 2}')

    def test_surplus_closers_after_structure_ignored(self) -> None:
        assert repair('[1, 2]]]}') == "[1, 2]"


class TestTruncationRepair:
    """Balancing of documents cut off before their end."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("[", "[]"),
            ("{", "{}"),
            ('{"a": [', '{"a": []}'),
            ("[1, 2,", "[1, 2]"),
            ("[1, 2, \n  ", "[1, 2]"),
            ('{"a": 1,', '{"a": 1}'),
            ('{"a":', '{"a":null}'),
            ('{"a": ', '{"a": null}'),
            ('{"a": 1, "b": ', '{"a": 1, "b": null}'),
            ('{"a":,', '{"a":null}'),
            ('{"a": {"b": [1, {"c": ', '{"a": {"b": [1, {"c": null}]}}'),
            ('{"a": "', '{"a": ""}'),
        ],
    )
    def test_balanced_output(self, raw: str, expected: str) -> None:
        assert repair(raw) == expected
        json.loads(repair(raw))

    def test_dangling_escape_introducer_removed(self) -> None:
        assert repair('{"a": "line\\') == '{"a": "line"}'

    def test_completed_escape_kept(self) -> None:
        repaired = repair('{"a": "x\\n')
        assert repaired == '{"a": "x\\n"}'
        assert json.loads(repaired) == {"a": "x\n"}

    def test_partial_unicode_escape_removed(self) -> None:
        assert repair('{"a": "caf\\u00') == '{"a": "caf"}'
        assert repair('{"a": "caf\\u') == '{"a": "caf"}'

    def test_escaped_backslash_then_u_is_literal(self) -> None:
        repaired = repair('{"a": "x\\\\u00')
        assert repaired == '{"a": "x\\\\u00"}'
        assert json.loads(repaired) == {"a": "x\\u00"}

    def test_report_describes_truncation(self) -> None:
        result = repair_with_report('[{"q":"a"},{"q":"b"')
        assert result.truncated
        assert result.appended == "}]"
        assert result.max_depth == 2
        assert result.changed
        assert "appended" in result.summary()


class TestFailures:
    """Inputs that cannot be repaired."""

    @pytest.mark.parametrize("raw", ["hello world", "", "   ", '"just a string"', "42"])
    def test_no_structure_found(self, raw: str) -> None:
        with pytest.raises(NoStructureFound) as exc_info:
            repair(raw)
        assert exc_info.value.raw_text == raw

    def test_no_structure_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            repair("hello world")

    @pytest.mark.parametrize(
        "raw", ['{"a": 1, "ke', '{"a": tru', "[1, 2.", "[1, -", '{"a": "\\x"}']
    )
    def test_repair_exhausted(self, raw: str) -> None:
        with pytest.raises(RepairExhausted) as exc_info:
            repair(raw)

        error = exc_info.value
        assert error.raw_text == raw
        assert isinstance(error.cause, json.JSONDecodeError)
        assert isinstance(error.__cause__, json.JSONDecodeError)
        with pytest.raises(json.JSONDecodeError):
            json.loads(error.repaired_text)

    def test_truncated_key_repaired_text(self) -> None:
        with pytest.raises(RepairExhausted) as exc_info:
            repair('{"a": 1, "ke')
        assert exc_info.value.repaired_text == '{"a": 1, "ke"}'
        assert str(exc_info.value).startswith("Repaired text still invalid")

    def test_context_can_be_left_out_of_message(self) -> None:
        scanner = Scanner('{"a": tru', ErrorReporting(include_context=False))
        with pytest.raises(RepairExhausted) as exc_info:
            scanner.scan()
        assert str(exc_info.value).endswith(
            f"column {exc_info.value.context.column}"
        )

    def test_nesting_beyond_parser_recursion(self) -> None:
        with pytest.raises(RepairExhausted) as exc_info:
            repair("[" * DEEP)

        error = exc_info.value
        assert isinstance(error, JsonMendError)
        assert isinstance(error.__cause__, RecursionError)
        assert error.repaired_text == "[" * DEEP + "]" * DEEP
        assert "too deep to parse" in str(error)

    def test_recursion_error_reported_as_exhausted(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(_text: str) -> None:
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(json, "loads", fail)
        with pytest.raises(RepairExhausted) as exc_info:
            repair("[[1")
        assert str(exc_info.value).startswith(
            "Repaired text still invalid: Nesting depth 2 too deep to parse"
        )
        assert exc_info.value.cause.doc == "[[1]]"


class TestNestingLimit:
    """Depth limit checked by the scanner before the strict parser runs."""

    def test_limit_exceeded(self) -> None:
        scanner = Scanner("[[[1", limits=RepairLimits(max_nesting_depth=2))
        with pytest.raises(SecurityError) as exc_info:
            scanner.scan()
        assert str(exc_info.value) == "Nesting depth 3 exceeds limit 2"

    def test_limit_checked_before_parsing(self) -> None:
        scanner = Scanner("[" * DEEP, limits=RepairLimits())
        with pytest.raises(SecurityError) as exc_info:
            scanner.scan()
        assert str(exc_info.value) == f"Nesting depth {DEEP} exceeds limit 100"

    def test_within_limit(self) -> None:
        scanner = Scanner("[[[1", limits=RepairLimits(max_nesting_depth=3))
        assert scanner.scan().value == [[[1]]]

    def test_unlimited_by_default(self) -> None:
        assert json.loads(repair("[" * 150)) == json.loads("[" * 150 + "]" * 150)


class TestScannerState:
    """Scanner object lifecycle and report values."""

    def test_valid_document_unchanged(self) -> None:
        raw = '{"a": [1, 2, {"b": null}], "c": "d", "e": true}'
        result = repair_with_report(raw)
        assert result.text == raw
        assert not result.changed
        assert result.summary() == "no changes"

    def test_scanner_ends_outside_string(self) -> None:
        scanner = Scanner('{"a": "unterminated')
        result = scanner.scan()
        assert isinstance(result, RepairResult)
        assert scanner.state is ScanState.OUTSIDE
        assert scanner.stack == []

    def test_concurrent_calls_are_independent(self) -> None:
        inputs = [f'{{"n": {i}, "s": "text {i}' for i in range(50)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(repair, inputs))
        for i, repaired in enumerate(results):
            assert json.loads(repaired) == {"n": i, "s": f"text {i}"}
