"""
Parsing facade for jsonmend - strict parse first, repair on failure.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Optional, TextIO, Union

from ..preprocessing.extractors import MarkdownExtractor
from ..security.exceptions import RepairError, RepairExhausted
from ..security.limits import LimitValidator
from ..utils.config import RepairConfig
from .scanner import RepairResult, Scanner

logger = logging.getLogger(__name__)


def loads(
    s: Union[str, bytes, bytearray],
    *,
    object_hook: Optional[Callable[[dict[str, Any]], Any]] = None,
    parse_float: Optional[Callable[[str], Any]] = None,
    parse_int: Optional[Callable[[str], Any]] = None,
    parse_constant: Optional[Callable[[str], Any]] = None,
    object_pairs_hook: Optional[Callable[[list[tuple[str, Any]]], Any]] = None,
    config: Optional[RepairConfig] = None,
) -> Any:
    """
    Deserialize model output to a Python object, repairing it if needed.

    Well-formed input is parsed by json.loads directly. Anything else goes
    through the recovery scanner and the repaired text is parsed instead.

    Standard json.loads parameters:
        s: JSON string to parse (str, bytes, or bytearray)
        object_hook: Function called for each decoded object (dict)
        parse_float: Function to parse JSON floats
        parse_int: Function to parse JSON integers
        parse_constant: Function to parse JSON constants (Infinity, NaN)
        object_pairs_hook: Function called with ordered pairs for each object

    jsonmend-specific parameters:
        config: RepairConfig object for limits and error reporting

    Returns:
        Parsed Python data structure

    Raises:
        NoStructureFound: If the text holds no object or array to salvage
        RepairExhausted: If the repaired text is still not valid JSON
        SecurityError: If security limits are exceeded
    """
    hooks: dict[str, Any] = {
        "object_hook": object_hook,
        "parse_float": parse_float,
        "parse_int": parse_int,
        "parse_constant": parse_constant,
        "object_pairs_hook": object_pairs_hook,
    }
    text = _decode(s)
    config = config or RepairConfig()
    _validate_input_size(text, config)

    try:
        return json.loads(text, **hooks)
    except json.JSONDecodeError as e:
        logger.debug(f"Strict parse failed ({e.msg} at pos {e.pos}), repairing")
    except RecursionError:
        logger.debug("Strict parse ran out of recursion depth, repairing")

    result = _repair_internal(text, config)
    if not any(hooks.values()):
        return result.value
    return json.loads(result.text, **hooks)


def load(fp: TextIO, **kwargs: Any) -> Any:
    """
    Deserialize a file of model output (drop-in replacement for json.load).

    Same as loads() but reads from a file-like object.
    """
    return loads(fp.read(), **kwargs)


def loads_with_report(
    s: Union[str, bytes, bytearray], *, config: Optional[RepairConfig] = None
) -> RepairResult:
    """
    Parse model output and report what had to be repaired.

    Well-formed input yields a report whose ``changed`` is False.
    """
    text = _decode(s)
    config = config or RepairConfig()
    _validate_input_size(text, config)

    try:
        value = json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return _repair_internal(text, config)
    return RepairResult(text=text, value=value)


def _decode(s: Union[str, bytes, bytearray]) -> str:
    if isinstance(s, (bytes, bytearray)):
        return s.decode("utf-8")
    if isinstance(s, str):
        return s
    raise TypeError(
        f"the JSON object must be str, bytes or bytearray, not {type(s).__name__}"
    )


def _validate_input_size(text: str, config: RepairConfig) -> None:
    assert config.limits is not None
    LimitValidator(config.limits).validate_input_size(text)


def _repair_internal(text: str, config: RepairConfig) -> RepairResult:
    """Run preprocessing, the scanner and limit checks on malformed text."""
    extractor = MarkdownExtractor()
    span = None
    if extractor.should_apply(config):
        span = extractor.locate_code_block(text)
    if span is not None:
        # Fenced content first, the whole response as the fallback
        start, end = span
        try:
            result = _scan(text[start:end], config)
        except RepairError as e:
            logger.debug(f"Fenced block not repairable ({e}), using full text")
        else:
            return _logged(
                replace(
                    result,
                    skipped_prefix=result.skipped_prefix + start,
                    skipped_suffix=result.skipped_suffix + len(text) - end,
                )
            )

    try:
        result = _scan(text, config)
    except RepairExhausted as e:
        logger.warning(f"Repair exhausted: {e}")
        raise
    return _logged(result)


def _scan(text: str, config: RepairConfig) -> RepairResult:
    return Scanner(text, config.error_reporting, config.limits).scan()


def _logged(result: RepairResult) -> RepairResult:
    if result.changed:
        logger.info(f"Repaired malformed JSON: {result.summary()}")
    return result
