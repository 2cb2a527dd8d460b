"""
side.py

The four borders of a square tile plus a NONE sentinel.
"""

from enum import Enum
from typing import Tuple


class Side(str, Enum):
    """Tile borders in a fixed orientation."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"

    def opposite(self) -> "Side":
        """Top<->Bottom, Left<->Right; NONE maps to itself."""
        return {
            Side.TOP: Side.BOTTOM,
            Side.BOTTOM: Side.TOP,
            Side.LEFT: Side.RIGHT,
            Side.RIGHT: Side.LEFT,
            Side.NONE: Side.NONE,
        }[self]

    def short(self) -> str:
        return {"top": "T", "bottom": "B", "left": "L", "right": "R", "none": "-"}[self.value]

    @classmethod
    def real(cls) -> Tuple["Side", ...]:
        """The four real sides in canonical order (TOP, BOTTOM, LEFT, RIGHT)."""
        return (cls.TOP, cls.BOTTOM, cls.LEFT, cls.RIGHT)
