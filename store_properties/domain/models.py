"""Domain models for job priority and node ordering properties.

Enums use ``IntEnum`` because their values are what the store persists.
Ordering keys use Pydantic v2 frozen models for structural equality.
"""

from enum import IntEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

from store_properties.domain.exceptions import InvalidOrderingKeyError
from store_properties.domain.ordering_constants import ASCENDING_PREFIX


def _camel_label(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


class JobPriorityLevel(IntEnum):
    """Coarse job priority level."""

    LOWEST = 0
    BELOW_NORMAL = 1
    NORMAL = 2
    ABOVE_NORMAL = 3
    HIGHEST = 4

    @property
    def label(self) -> str:
        """Name used in priority text, e.g. ``AboveNormal``."""
        return _camel_label(self.name)

    @classmethod
    def from_label(cls, text: str) -> "JobPriorityLevel | None":
        """Resolve a level name case-insensitively.

        Args:
            text: Level name such as ``normal`` or ``AboveNormal``

        Returns:
            Matching level or None if the name is unknown

        Example:
            >>> JobPriorityLevel.from_label("abovenormal")
            <JobPriorityLevel.ABOVE_NORMAL: 3>
        """
        wanted = text.strip().lower()
        for level in cls:
            if level.label.lower() == wanted:
                return level
        return None


class OrderingAttribute(IntEnum):
    """Node resource a job prefers to be ordered by."""

    NONE = 0
    MEMORY = 1
    CORES = 2

    @property
    def label(self) -> str:
        """Name used in order-by text, e.g. ``Memory``."""
        return _camel_label(self.name)

    @classmethod
    def from_label(cls, text: str) -> "OrderingAttribute | None":
        """Resolve a sortable attribute name case-insensitively.

        ``None`` is never returned as a match since it cannot be encoded.
        """
        wanted = text.strip().lower()
        for attribute in (cls.MEMORY, cls.CORES):
            if attribute.label.lower() == wanted:
                return attribute
        return None


class SortDirection(IntEnum):
    """Sort direction, stored in the high bit of an encoded key."""

    DESCENDING = 0x00
    ASCENDING = 0x80


class OrderingKey(BaseModel):
    """Single (attribute, direction) node ordering preference.

    Equality and hashing are structural. The four valid keys are also
    available as shared instances (``MEMORY_ASC`` and friends) returned by
    ``from_byte`` and ``create``.
    """

    model_config = ConfigDict(frozen=True)

    attribute: OrderingAttribute
    direction: SortDirection = SortDirection.DESCENDING

    @field_validator("attribute")
    @classmethod
    def _attribute_is_sortable(cls, value: OrderingAttribute) -> OrderingAttribute:
        if value == OrderingAttribute.NONE:
            raise ValueError("Ordering attribute must be Memory or Cores")
        return value

    def to_byte(self) -> int:
        """Encode as ``attribute | direction``."""
        return int(self.attribute) | int(self.direction)

    @property
    def ascending(self) -> bool:
        return self.direction == SortDirection.ASCENDING

    def __str__(self) -> str:
        prefix = ASCENDING_PREFIX if self.ascending else ""
        return f"{prefix}{self.attribute.label}"

    def __repr__(self) -> str:
        return f"OrderingKey({self})"

    @classmethod
    def from_byte(cls, value: int) -> "OrderingKey":
        """Decode a single encoded key.

        Args:
            value: Encoded byte

        Returns:
            Shared canonical instance for the byte

        Raises:
            InvalidOrderingKeyError: If the byte is not one of the four
                canonical keys (including attribute ``None``)

        Example:
            >>> OrderingKey.from_byte(0x81)
            OrderingKey(-Memory)
        """
        key = _CANONICAL_BY_BYTE.get(value)
        if key is None:
            raise InvalidOrderingKeyError(f"Unknown ordering key byte: {value!r}")
        return key

    @classmethod
    def create(cls, attribute: int, direction: int) -> "OrderingKey":
        """Get the canonical key for an attribute and direction.

        Raises:
            InvalidOrderingKeyError: If the pair is not one of the four
                canonical keys
        """
        try:
            attribute = OrderingAttribute(attribute)
            direction = SortDirection(direction)
        except ValueError as e:
            raise InvalidOrderingKeyError(
                f"Unknown ordering key: attribute={attribute}, direction={direction}"
            ) from e

        key = _CANONICAL_BY_BYTE.get(int(attribute) | int(direction))
        if key is None:
            raise InvalidOrderingKeyError(
                f"Unknown ordering key: attribute={attribute.label}, "
                f"direction={direction.name.lower()}"
            )
        return key


MEMORY_ASC: Final[OrderingKey] = OrderingKey(
    attribute=OrderingAttribute.MEMORY, direction=SortDirection.ASCENDING
)
MEMORY_DESC: Final[OrderingKey] = OrderingKey(
    attribute=OrderingAttribute.MEMORY, direction=SortDirection.DESCENDING
)
CORES_ASC: Final[OrderingKey] = OrderingKey(
    attribute=OrderingAttribute.CORES, direction=SortDirection.ASCENDING
)
CORES_DESC: Final[OrderingKey] = OrderingKey(
    attribute=OrderingAttribute.CORES, direction=SortDirection.DESCENDING
)

CANONICAL_ORDERING_KEYS: Final[tuple[OrderingKey, ...]] = (
    MEMORY_ASC,
    MEMORY_DESC,
    CORES_ASC,
    CORES_DESC,
)

# Built once at import; read-only afterwards
_CANONICAL_BY_BYTE: Final[dict[int, OrderingKey]] = {
    key.to_byte(): key for key in CANONICAL_ORDERING_KEYS
}
