"""Bit layout constants for encoded node ordering preferences."""

from typing import Final

ATTRIBUTE_MASK: Final[int] = 0x7F
"""Low 7 bits of an encoded key hold the ordering attribute."""

DIRECTION_MASK: Final[int] = 0x80
"""High bit of an encoded key holds the sort direction."""

MAX_ORDERING_KEYS: Final[int] = 4
"""One key per byte of the 32-bit encoded form."""

ENCODED_WIDTH_BYTES: Final[int] = 4

INT32_MIN: Final[int] = -(2**31)
INT32_MAX: Final[int] = 2**31 - 1

KEY_SEPARATOR: Final[str] = ","
ASCENDING_PREFIX: Final[str] = "-"
