"""Exception hierarchy for store property values.

Two lanes: programmer errors raise one of these, untrusted text input is
reported through the ``try_*``/``parse`` return values instead.
"""


class StorePropertyError(Exception):
    """Base exception for all property value errors."""

    pass


class PriorityRangeError(StorePropertyError, ValueError):
    """Expanded priority outside the 0-4000 scale."""

    def __init__(self, value: int, lowest: int, highest: int) -> None:
        """Initialize with the offending value and the legal bounds."""
        self.value = value
        super().__init__(
            f"The expanded priority value must be between {lowest} and {highest}, "
            f"got {value}"
        )


class PriorityNotPredefinedError(StorePropertyError, ValueError):
    """Expanded priority that does not sit on a named level."""

    def __init__(self, value_text: str, lower_text: str, upper_text: str) -> None:
        """Initialize with formatted value and closest legal neighbours."""
        self.value_text = value_text
        self.lower_text = lower_text
        self.upper_text = upper_text
        super().__init__(
            f"Expanded priority {value_text} is not accepted here; "
            f"use {lower_text} or {upper_text}"
        )


class PriorityParseError(StorePropertyError, ValueError):
    """Priority text that is not recognizable."""

    pass


class InvalidOrderingKeyError(StorePropertyError, ValueError):
    """Attribute/direction pair or byte that is not a canonical ordering key."""

    pass


class OrderingListError(StorePropertyError):
    """Invalid operation on an ordering key list."""

    pass


class OrderingListFullError(OrderingListError):
    """Ordering key list already holds the maximum number of keys."""

    def __init__(self, capacity: int) -> None:
        """Initialize with list capacity."""
        self.capacity = capacity
        super().__init__(f"List is full ({capacity} keys)")


class DuplicateOrderingAttributeError(OrderingListError):
    """Ordering key list already has a key for the attribute."""

    def __init__(self, attribute_label: str) -> None:
        """Initialize with the repeated attribute name."""
        self.attribute_label = attribute_label
        super().__init__(
            f"Ordering key for attribute {attribute_label} already exists in the list"
        )


class OrderingParseError(StorePropertyError, ValueError):
    """Order-by text that could not be parsed where a value was required."""

    pass


class PropertyTypeError(StorePropertyError, TypeError):
    """Property value of a type the converter does not accept."""

    def __init__(self, property_name: str, value: object) -> None:
        """Initialize with property name and the rejected value."""
        self.property_name = property_name
        super().__init__(
            f"Property {property_name} cannot hold a value of type "
            f"{type(value).__name__}"
        )


class PriorityLevelError(StorePropertyError, ValueError):
    """Legacy priority level outside Lowest..Highest."""

    def __init__(self, level: int, lowest: int, highest: int) -> None:
        """Initialize with the offending level and the legal bounds."""
        self.level = level
        super().__init__(
            f"The priority level must be between {lowest} and {highest}, got {level}"
        )
