"""Job priority scale and node ordering encodings for the scheduler store."""

from store_properties.domain.exceptions import (
    DuplicateOrderingAttributeError,
    InvalidOrderingKeyError,
    OrderingListError,
    OrderingListFullError,
    OrderingParseError,
    PriorityLevelError,
    PriorityNotPredefinedError,
    PriorityParseError,
    PriorityRangeError,
    PropertyTypeError,
    StorePropertyError,
)
from store_properties.domain.models import (
    CORES_ASC,
    CORES_DESC,
    MEMORY_ASC,
    MEMORY_DESC,
    JobPriorityLevel,
    OrderingAttribute,
    OrderingKey,
    SortDirection,
)
from store_properties.services.ordering_keys import (
    OrderingKeyList,
    create_key,
    from_byte,
    parse_key,
)
from store_properties.services.priority_scale import (
    PriorityParseResult,
    base_value_of,
    ceiling_of_bucket,
    format_priority,
    level_of,
    parse_priority,
    priority_offset,
    try_parse_priority,
)
from store_properties.services.property_values import (
    coerce_order_by,
    compare_order_by,
    expanded_priority_to_level,
    level_to_expanded_priority,
)

__all__ = [
    # Priority scale
    "JobPriorityLevel",
    "PriorityParseResult",
    "base_value_of",
    "ceiling_of_bucket",
    "format_priority",
    "level_of",
    "parse_priority",
    "priority_offset",
    "try_parse_priority",
    # Ordering keys
    "CORES_ASC",
    "CORES_DESC",
    "MEMORY_ASC",
    "MEMORY_DESC",
    "OrderingAttribute",
    "OrderingKey",
    "OrderingKeyList",
    "SortDirection",
    "create_key",
    "from_byte",
    "parse_key",
    # Property values
    "coerce_order_by",
    "compare_order_by",
    "expanded_priority_to_level",
    "level_to_expanded_priority",
    # Errors
    "DuplicateOrderingAttributeError",
    "InvalidOrderingKeyError",
    "OrderingListError",
    "OrderingListFullError",
    "OrderingParseError",
    "PriorityLevelError",
    "PriorityNotPredefinedError",
    "PriorityParseError",
    "PriorityRangeError",
    "PropertyTypeError",
    "StorePropertyError",
]
