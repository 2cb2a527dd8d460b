"""
tile.py

A puzzle tile: stable id, current grid orientation, and the neighbor
matches discovered so far.
"""

from typing import Dict, Optional, Tuple

import numpy as np

from tile_utils.errors import MatchAmbiguityError
from tile_utils.grid_utils import (
    border,
    borders,
    flip_vertical,
    render,
    rotate90_clockwise,
    strip_edges,
)
from tile_utils.side import Side

# this tile's side -> (neighbor id, neighbor's matching side)
Matches = Dict[Side, Tuple[int, Side]]


class Tile:
    """
    One square tile.

    The id never changes. `grid` is rebound (never written into) when the
    tile is rotated or flipped. `matches` holds at most one neighbor per
    side, so at most four entries.
    """

    def __init__(self, tile_id: int, grid: np.ndarray, matches: Optional[Matches] = None):
        self.id = tile_id
        self.grid = grid
        self.matches: Matches = dict(matches) if matches else {}

    @property
    def size(self) -> int:
        return int(self.grid.shape[0])

    def copy(self) -> "Tile":
        """Same id, same grid value, independent matches dict."""
        return Tile(self.id, self.grid, self.matches)

    def rotate(self) -> "Tile":
        self.grid = rotate90_clockwise(self.grid)
        return self

    def flip(self) -> "Tile":
        self.grid = flip_vertical(self.grid)
        return self

    def border(self, side: Side) -> str:
        return border(self.grid, side)

    def borders(self):
        return borders(self.grid)

    def interior(self) -> np.ndarray:
        """Grid with the border removed on every matched side."""
        return strip_edges(self.grid, self.matches.keys())

    def rows(self):
        return render(self.grid)

    def __repr__(self) -> str:
        sides = ",".join(
            f"{side.short()}->{other}{other_side.short()}"
            for side, (other, other_side) in sorted(self.matches.items(), key=lambda kv: kv[0].value)
        )
        return f"Tile({self.id}, {self.size}×{self.size}, matches=[{sides}])"


def record_match(a: Tile, side_a: Side, b: Tile, side_b: Side) -> None:
    """
    Record that a's side_a touches b's side_b, on both tiles.

    Re-recording an identical match is a no-op.

    Raises:
      MatchAmbiguityError if either side is NONE, a side already holds a
      different neighbor, or a tile would exceed four matches
    """
    for tile, side, other, other_side in ((a, side_a, b, side_b), (b, side_b, a, side_a)):
        if side == Side.NONE:
            raise MatchAmbiguityError(f"Tile {tile.id}: cannot record a match on Side.NONE")

        existing = tile.matches.get(side)
        if existing is not None and existing != (other.id, other_side):
            raise MatchAmbiguityError(
                f"Tile {tile.id}: side {side.value} already matches {existing[0]}:{existing[1].value}, "
                f"refusing {other.id}:{other_side.value}"
            )

        if existing is None and len(tile.matches) >= 4:
            raise MatchAmbiguityError(f"Tile {tile.id}: more than 4 matches")

    a.matches[side_a] = (b.id, side_b)
    b.matches[side_b] = (a.id, side_a)
