"""Conversions between catalog property values and priority/ordering types.

The property catalog hands these around as opaque values:
``ExpandedPriority`` as an int, ``Priority`` as a legacy level and
``OrderBy`` as a key list, its text, or its encoded int. Missing values
take the defaults from ``get_settings()``.
"""

from typing import Any, cast

from store_properties.config.logging_config import get_logger
from store_properties.config.settings import get_settings
from store_properties.domain.exceptions import (
    OrderingParseError,
    PriorityLevelError,
    PriorityNotPredefinedError,
    PriorityRangeError,
    PropertyTypeError,
)
from store_properties.domain.models import JobPriorityLevel, OrderingKey
from store_properties.domain.priority_constants import (
    LEVELS_PER_PRIORITY_BUCKET,
    PRIORITY_HIGHEST,
    PRIORITY_LOWEST,
)
from store_properties.services.ordering_keys import OrderingKeyList
from store_properties.services.priority_scale import (
    base_value_of,
    format_priority,
    level_of,
)

ORDER_BY_PROPERTY = "OrderBy"

logger = cast(Any, get_logger(__name__))


def expanded_priority_to_level(
    value: int | None, *, predefined_only: bool | None = None
) -> JobPriorityLevel:
    """Convert an ``ExpandedPriority`` value to the legacy ``Priority`` level.

    Args:
        value: Expanded priority, None meaning the configured default
        predefined_only: Only accept values that sit exactly on a level;
            None uses the ``predefined_priority_only`` setting

    Returns:
        Legacy priority level

    Raises:
        PriorityRangeError: If the value is outside the 0-4000 scale
        PriorityNotPredefinedError: If only predefined values are accepted
            and the value falls between levels

    Example:
        >>> expanded_priority_to_level(3000)
        <JobPriorityLevel.ABOVE_NORMAL: 3>
        >>> expanded_priority_to_level(2100, predefined_only=False)
        <JobPriorityLevel.NORMAL: 2>
    """
    if value is None or predefined_only is None:
        settings = get_settings()
        if value is None:
            value = settings.default_expanded_priority
        if predefined_only is None:
            predefined_only = settings.predefined_priority_only

    if value < PRIORITY_LOWEST or value > PRIORITY_HIGHEST:
        raise PriorityRangeError(value, PRIORITY_LOWEST, PRIORITY_HIGHEST)

    if predefined_only and value % LEVELS_PER_PRIORITY_BUCKET != 0:
        closest_low = (value // LEVELS_PER_PRIORITY_BUCKET) * LEVELS_PER_PRIORITY_BUCKET
        closest_high = closest_low + LEVELS_PER_PRIORITY_BUCKET
        logger.warning(
            "expanded_priority_not_predefined",
            value=value,
            closest_low=closest_low,
            closest_high=closest_high,
        )
        raise PriorityNotPredefinedError(
            format_priority(value),
            format_priority(closest_low),
            format_priority(closest_high),
        )

    return level_of(value)


def level_to_expanded_priority(level: int | None) -> int:
    """Convert a legacy ``Priority`` level to ``ExpandedPriority``.

    None maps to the configured default expanded priority.

    Raises:
        PriorityLevelError: If ``level`` is not a legacy level
    """
    if level is None:
        return get_settings().default_expanded_priority
    try:
        priority_level = JobPriorityLevel(level)
    except ValueError as e:
        raise PriorityLevelError(
            level, int(JobPriorityLevel.LOWEST), int(JobPriorityLevel.HIGHEST)
        ) from e
    return base_value_of(priority_level)


def coerce_order_by(value: object) -> OrderingKeyList:
    """Normalize an ``OrderBy`` property value to a key list.

    Accepts a key list (returned as is), a single key, order-by text, or
    the encoded integer. None or blank text yields a fresh copy of the
    configured default list.

    Raises:
        OrderingParseError: If text cannot be parsed
        PropertyTypeError: If the value has any other type
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return get_settings().default_order_by_list()
    if isinstance(value, OrderingKeyList):
        return value
    if isinstance(value, OrderingKey):
        return OrderingKeyList.of(value)
    if isinstance(value, str):
        parsed = OrderingKeyList.parse(value)
        if parsed is None:
            raise OrderingParseError(f"Cannot parse {ORDER_BY_PROPERTY} value {value!r}")
        return parsed
    if isinstance(value, int) and not isinstance(value, bool):
        return OrderingKeyList.from_int32(value)
    raise PropertyTypeError(ORDER_BY_PROPERTY, value)


def compare_order_by(left: OrderingKeyList, right: OrderingKeyList) -> int:
    """Three-way comparison of two lists by encoded value, for row sorting."""
    left_value = left.to_int32()
    right_value = right.to_int32()
    return (left_value > right_value) - (left_value < right_value)
