"""Node ordering preferences and their 32-bit encoding.

A job may ask for candidate nodes to be ordered by up to four
(attribute, direction) keys. The list is stored as one signed 32-bit
integer, one key per byte, first key in the least significant byte:

    [-Memory, Cores] → bytes 81 02 00 00 → 641

Text form is comma separated, ``-`` marking ascending order:
``"-Memory,Cores"``.
"""

from collections.abc import Iterable, Iterator
from typing import Any, cast

from store_properties.config.logging_config import get_logger
from store_properties.domain.exceptions import (
    DuplicateOrderingAttributeError,
    InvalidOrderingKeyError,
    OrderingListFullError,
)
from store_properties.domain.models import (
    OrderingAttribute,
    OrderingKey,
    SortDirection,
)
from store_properties.domain.ordering_constants import (
    ASCENDING_PREFIX,
    ATTRIBUTE_MASK,
    DIRECTION_MASK,
    ENCODED_WIDTH_BYTES,
    INT32_MAX,
    INT32_MIN,
    KEY_SEPARATOR,
    MAX_ORDERING_KEYS,
)

logger = cast(Any, get_logger(__name__))


def from_byte(value: int) -> OrderingKey:
    """Decode one encoded key. See ``OrderingKey.from_byte``."""
    return OrderingKey.from_byte(value)


def create_key(attribute: int, direction: int) -> OrderingKey:
    """Canonical key for a pair. See ``OrderingKey.create``."""
    return OrderingKey.create(attribute, direction)


def parse_key(token: str) -> OrderingKey | None:
    """Parse a single key such as ``-Memory`` or ``cores``.

    Returns:
        Canonical key, or None if the token names no sortable attribute
    """
    text = token.strip()
    direction = SortDirection.DESCENDING
    if text.startswith(ASCENDING_PREFIX):
        direction = SortDirection.ASCENDING
        text = text[len(ASCENDING_PREFIX) :]

    attribute = OrderingAttribute.from_label(text)
    if attribute is None:
        logger.debug("ordering_key_parse_failed", token=token)
        return None
    return OrderingKey.create(attribute, direction)


class OrderingKeyList:
    """Ordered builder of up to four ordering keys, one per attribute.

    Not safe for concurrent ``add`` calls; the encoded ``int`` is the
    value to share.
    """

    def __init__(self, keys: Iterable[OrderingKey] = ()) -> None:
        """Initialize, adding ``keys`` in order with the usual checks.

        Raises:
            OrderingListError: If ``keys`` break the size or uniqueness rules
        """
        self._keys: list[OrderingKey] = []
        for key in keys:
            self.add(key)

    @classmethod
    def of(cls, *keys: OrderingKey) -> "OrderingKeyList":
        """Build a list from keys given positionally.

        Example:
            >>> OrderingKeyList.of(MEMORY_ASC, CORES_DESC).to_int32()
            641
        """
        return cls(keys)

    def add(self, key: OrderingKey) -> "OrderingKeyList":
        """Append a key, returning the list for chaining.

        The list is left unchanged when the key is rejected.

        Raises:
            OrderingListFullError: If the list already holds four keys
            DuplicateOrderingAttributeError: If a key for the same attribute
                is already present
        """
        if len(self._keys) >= MAX_ORDERING_KEYS:
            logger.debug("ordering_key_rejected", key=str(key), reason="list_full")
            raise OrderingListFullError(MAX_ORDERING_KEYS)

        for existing in self._keys:
            if existing.attribute == key.attribute:
                logger.debug(
                    "ordering_key_rejected", key=str(key), reason="duplicate_attribute"
                )
                raise DuplicateOrderingAttributeError(key.attribute.label)

        self._keys.append(key)
        return self

    def copy(self) -> "OrderingKeyList":
        return OrderingKeyList(self._keys)

    def to_int32(self) -> int:
        """Encode as a signed little-endian 32-bit integer.

        Example:
            >>> OrderingKeyList.parse("-Memory,Cores").to_int32()
            641
        """
        encoded = bytearray(ENCODED_WIDTH_BYTES)
        for index, key in enumerate(self._keys):
            encoded[index] = key.to_byte()
        return int.from_bytes(encoded, "little", signed=True)

    @classmethod
    def from_int32(cls, number: int) -> "OrderingKeyList":
        """Decode an encoded list.

        Zero bytes are skipped; every other byte must be a canonical key.

        Args:
            number: Signed 32-bit encoded value

        Returns:
            Decoded list, empty for 0

        Raises:
            InvalidOrderingKeyError: If ``number`` is not a 32-bit value or
                a byte is not a canonical key
            DuplicateOrderingAttributeError: If two bytes share an attribute
        """
        result = cls()
        if number == 0:
            return result

        if number < INT32_MIN or number > INT32_MAX:
            raise InvalidOrderingKeyError(
                f"Encoded ordering {number} is not a 32-bit value"
            )

        for byte in number.to_bytes(ENCODED_WIDTH_BYTES, "little", signed=True):
            attribute = byte & ATTRIBUTE_MASK
            direction = byte & DIRECTION_MASK
            if attribute != OrderingAttribute.NONE:
                result.add(OrderingKey.create(attribute, direction))
        return result

    @classmethod
    def parse(cls, text: str) -> "OrderingKeyList | None":
        """Parse comma separated order-by text without raising.

        Empty tokens are ignored, so ``""`` yields an empty list.

        Args:
            text: Untrusted text such as ``"-Memory,Cores"``

        Returns:
            Parsed list, or None if a token is unknown, an attribute is
            repeated or more than four keys are given

        Example:
            >>> str(OrderingKeyList.parse(" cores , -memory "))
            'Cores,-Memory'
            >>> OrderingKeyList.parse("Memory,-Memory") is None
            True
        """
        result = cls()
        for token in text.split(KEY_SEPARATOR):
            if not token.strip():
                continue
            key = parse_key(token)
            if key is None:
                logger.debug("ordering_parse_failed", text=text, reason="unknown_key")
                return None
            try:
                result.add(key)
            except (OrderingListFullError, DuplicateOrderingAttributeError) as e:
                logger.debug("ordering_parse_failed", text=text, reason=str(e))
                return None
        return result

    def __str__(self) -> str:
        return KEY_SEPARATOR.join(str(key) for key in self._keys)

    def __repr__(self) -> str:
        return f"OrderingKeyList({str(self)!r})"

    def __int__(self) -> int:
        return self.to_int32()

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[OrderingKey]:
        return iter(self._keys)

    def __getitem__(self, index: int) -> OrderingKey:
        return self._keys[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OrderingKeyList):
            return self._keys == other._keys
        if isinstance(other, (list, tuple)):
            return self._keys == list(other)
        return NotImplemented

    # Mutable builder
    __hash__ = None  # type: ignore[assignment]
