"""Expanded priority scale constants.

The expanded scale runs from 0 to 4000. Each legacy priority level owns a
bucket of 1000 values starting at its base value, except Highest which is
the single value 4000.
"""

from typing import Final

LEVELS_PER_PRIORITY_BUCKET: Final[int] = 1000
"""Width of one priority bucket on the expanded scale."""

PRIORITY_LOWEST: Final[int] = 0
PRIORITY_BELOW_NORMAL: Final[int] = 1000
PRIORITY_NORMAL: Final[int] = 2000
PRIORITY_ABOVE_NORMAL: Final[int] = 3000
PRIORITY_HIGHEST: Final[int] = 4000

MAX_PRIORITY_OFFSET_FROM_BELOW: Final[int] = LEVELS_PER_PRIORITY_BUCKET // 2
"""Largest offset written as ``Level+N`` when formatting.

Offsets above this are written relative to the next level up
(``Level-N``). An offset of exactly 500 stays on the lower level:

    - 2500 → "Normal+500"
    - 2501 → "AboveNormal-499"
"""

PARSE_FAILURE_VALUE: Final[int] = -1
"""Value reported alongside a failed priority parse."""
