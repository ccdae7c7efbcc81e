"""Expanded job priority scale.

Converts between the five legacy priority levels and the 0-4000 expanded
scale, and between expanded values and their text form:

- ``2000`` ↔ ``"Normal"``
- ``2100`` ↔ ``"Normal+100"``
- ``2999`` ↔ ``"AboveNormal-1"``
- ``"322"`` → ``322``

Formatting is a programmer contract and raises on out-of-range values.
Parsing handles untrusted text and reports failure through its result.
"""

import re
from typing import Any, Final, NamedTuple, cast

from store_properties.config.logging_config import get_logger
from store_properties.domain.exceptions import PriorityParseError, PriorityRangeError
from store_properties.domain.models import JobPriorityLevel
from store_properties.domain.priority_constants import (
    LEVELS_PER_PRIORITY_BUCKET,
    MAX_PRIORITY_OFFSET_FROM_BELOW,
    PARSE_FAILURE_VALUE,
    PRIORITY_ABOVE_NORMAL,
    PRIORITY_BELOW_NORMAL,
    PRIORITY_HIGHEST,
    PRIORITY_LOWEST,
    PRIORITY_NORMAL,
)

logger = cast(Any, get_logger(__name__))

# Highest first; formatting walks down until it finds the containing bucket
PRIORITY_THRESHOLDS: Final[tuple[tuple[int, JobPriorityLevel], ...]] = (
    (PRIORITY_HIGHEST, JobPriorityLevel.HIGHEST),
    (PRIORITY_ABOVE_NORMAL, JobPriorityLevel.ABOVE_NORMAL),
    (PRIORITY_NORMAL, JobPriorityLevel.NORMAL),
    (PRIORITY_BELOW_NORMAL, JobPriorityLevel.BELOW_NORMAL),
    (PRIORITY_LOWEST, JobPriorityLevel.LOWEST),
)

LEVEL_PLUS_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z]+\+[0-9]+")
LEVEL_MINUS_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z]+\-[0-9]+")
NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]+")


class PriorityParseResult(NamedTuple):
    """Outcome of ``try_parse_priority``; ``value`` is -1 when ``ok`` is False."""

    ok: bool
    value: int


def level_of(expanded_priority: int) -> JobPriorityLevel:
    """Map an expanded priority to its legacy level.

    Values above the scale clamp to Highest, values below clamp to Lowest.

    Example:
        >>> level_of(3450)
        <JobPriorityLevel.ABOVE_NORMAL: 3>
    """
    pri = expanded_priority // LEVELS_PER_PRIORITY_BUCKET
    if pri > JobPriorityLevel.HIGHEST:
        return JobPriorityLevel.HIGHEST
    if pri < JobPriorityLevel.LOWEST:
        return JobPriorityLevel.LOWEST
    return JobPriorityLevel(pri)


def base_value_of(level: int) -> int:
    """Expanded value of a legacy level (the bottom of its bucket)."""
    return int(level) * LEVELS_PER_PRIORITY_BUCKET


def ceiling_of_bucket(expanded_priority: int) -> int:
    """Top of the bucket containing ``expanded_priority``.

    The input is clamped into the scale first. Highest is its own
    single-value bucket.

    Example:
        >>> ceiling_of_bucket(2100)
        2999
    """
    value = min(max(expanded_priority, PRIORITY_LOWEST), PRIORITY_HIGHEST)
    if value == PRIORITY_HIGHEST:
        return PRIORITY_HIGHEST
    pri = value // LEVELS_PER_PRIORITY_BUCKET
    return (pri + 1) * LEVELS_PER_PRIORITY_BUCKET - 1


def _check_range(expanded_priority: int) -> None:
    if expanded_priority > PRIORITY_HIGHEST or expanded_priority < PRIORITY_LOWEST:
        raise PriorityRangeError(expanded_priority, PRIORITY_LOWEST, PRIORITY_HIGHEST)


def priority_offset(expanded_priority: int) -> tuple[JobPriorityLevel, int]:
    """Nearest named level and signed offset from it.

    Offsets up to +500 are taken from the level below; larger ones are
    expressed as a negative offset from the level above.

    Args:
        expanded_priority: Value on the 0-4000 scale

    Returns:
        (level, offset) pair, offset 0 for exact levels

    Raises:
        PriorityRangeError: If the value is outside the scale

    Example:
        >>> priority_offset(2999)
        (<JobPriorityLevel.ABOVE_NORMAL: 3>, -1)
    """
    _check_range(expanded_priority)

    # Level of the previous (higher) threshold
    last_level = JobPriorityLevel.HIGHEST
    for threshold, level in PRIORITY_THRESHOLDS:
        if expanded_priority == threshold:
            return level, 0
        if expanded_priority > threshold:
            offset = expanded_priority - threshold
            if offset <= MAX_PRIORITY_OFFSET_FROM_BELOW:
                return level, offset
            return last_level, offset - LEVELS_PER_PRIORITY_BUCKET
        last_level = level

    raise AssertionError(f"No priority bucket for {expanded_priority}")


def format_priority(expanded_priority: int) -> str:
    """Render an expanded priority as ``Level``, ``Level+N`` or ``Level-N``.

    Raises:
        PriorityRangeError: If the value is outside the scale

    Example:
        >>> format_priority(2100)
        'Normal+100'
        >>> format_priority(2500)
        'Normal+500'
    """
    level, offset = priority_offset(expanded_priority)
    if offset == 0:
        return level.label
    return f"{level.label}{offset:+d}"


def _parse_offset_form(text: str, separator: str, sign: int) -> int | None:
    name, _, digits = text.partition(separator)
    level = JobPriorityLevel.from_label(name)
    if level is None:
        logger.debug("priority_parse_failed", text=text, reason="unknown_level")
        return None
    try:
        offset = int(digits)
    except ValueError:
        logger.debug("priority_parse_failed", text=text, reason="bad_offset")
        return None
    return base_value_of(level) + sign * offset


def try_parse_priority(text: str) -> PriorityParseResult:
    """Parse priority text without raising.

    Accepted forms, tried in order:

    1. ``Level+N`` (e.g. ``Normal+100``)
    2. ``Level-N`` (e.g. ``AboveNormal-900``)
    3. a bare integer (e.g. ``322``)
    4. a level name, any case (e.g. ``highest``)

    The resulting value must lie on the 0-4000 scale.

    Args:
        text: Untrusted priority text

    Returns:
        PriorityParseResult; ``(False, -1)`` on any failure

    Example:
        >>> try_parse_priority("AboveNormal-900")
        PriorityParseResult(ok=True, value=2100)
        >>> try_parse_priority("5000")
        PriorityParseResult(ok=False, value=-1)
    """
    failed = PriorityParseResult(False, PARSE_FAILURE_VALUE)

    value: int | None
    if LEVEL_PLUS_PATTERN.fullmatch(text):
        value = _parse_offset_form(text, "+", 1)
    elif LEVEL_MINUS_PATTERN.fullmatch(text):
        value = _parse_offset_form(text, "-", -1)
    elif NUMBER_PATTERN.fullmatch(text):
        try:
            value = int(text)
        except ValueError:
            logger.debug("priority_parse_failed", text=text, reason="bad_number")
            return failed
    else:
        level = JobPriorityLevel.from_label(text)
        if level is None:
            logger.debug("priority_parse_failed", text=text, reason="unknown_level")
            return failed
        value = base_value_of(level)

    if value is None:
        return failed

    if value > PRIORITY_HIGHEST or value < PRIORITY_LOWEST:
        logger.debug(
            "priority_parse_failed", text=text, reason="out_of_range", value=value
        )
        return failed

    return PriorityParseResult(True, value)


def parse_priority(text: str) -> int:
    """Parse priority text from a trusted source such as a job file.

    Raises:
        PriorityParseError: If ``try_parse_priority`` would fail
    """
    result = try_parse_priority(text)
    if not result.ok:
        raise PriorityParseError(f"The priority value {text!r} is not recognizable")
    return result.value
