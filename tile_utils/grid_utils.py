"""
Grid primitives shared by every stage.

A grid is a square H×H numpy array of single characters (dtype '<U1').
Transforms never write into their input: each returns a fresh read-only
array, so a Tile changes orientation by rebinding its grid.

Reading order for borders is fixed for every grid:
  - top / bottom rows:    left → right
  - left / right columns: top → bottom
"""

from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from tile_utils.errors import MatchAmbiguityError
from tile_utils.side import Side


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


def to_grid(rows: Sequence[str]) -> np.ndarray:
    """
    Convert a list of equal-length strings to a read-only character grid.

    Raises:
      ValueError if rows are empty, ragged or non-square
    """
    if len(rows) == 0:
        raise ValueError("Grid must have at least one row")

    width = len(rows[0])
    for r, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"Row {r} has length {len(row)}, expected {width}")

    if width != len(rows):
        raise ValueError(f"Grid must be square, got {len(rows)}×{width}")

    return _frozen(np.array([list(row) for row in rows], dtype="<U1"))


def render(grid: np.ndarray) -> List[str]:
    """Grid back to a list of row strings."""
    return ["".join(row) for row in grid.tolist()]


def top_row(grid: np.ndarray) -> str:
    return "".join(grid[0, :].tolist())


def bottom_row(grid: np.ndarray) -> str:
    return "".join(grid[-1, :].tolist())


def left_col(grid: np.ndarray) -> str:
    return "".join(grid[:, 0].tolist())


def right_col(grid: np.ndarray) -> str:
    return "".join(grid[:, -1].tolist())


def border(grid: np.ndarray, side: Side) -> str:
    """Border string for one side."""
    if side == Side.TOP:
        return top_row(grid)
    if side == Side.BOTTOM:
        return bottom_row(grid)
    if side == Side.LEFT:
        return left_col(grid)
    if side == Side.RIGHT:
        return right_col(grid)
    raise ValueError(f"No border for side: {side}")


def borders(grid: np.ndarray) -> List[Tuple[Side, str]]:
    """All four borders, eagerly, in TOP, BOTTOM, LEFT, RIGHT order."""
    return [(side, border(grid, side)) for side in Side.real()]


def rotate90_clockwise(grid: np.ndarray) -> np.ndarray:
    """out[c, n-1-r] = grid[r, c]."""
    return _frozen(np.rot90(grid, k=-1))


def flip_vertical(grid: np.ndarray) -> np.ndarray:
    """Reverse row order (mirror across the horizontal axis)."""
    return _frozen(np.flipud(grid))


def strip_edges(grid: np.ndarray, sides: Iterable[Side]) -> np.ndarray:
    """
    Remove the border row/column for each given side.

    Top removes the first row, Bottom the last row, Left the first column,
    Right the last column. Sides on the same axis may be combined, and the
    result does not depend on the order they are given in.

    Raises:
      MatchAmbiguityError if a side is repeated, if Side.NONE is given, or
      if stripping would leave nothing behind
    """
    sides = list(sides)
    seen = set()
    for side in sides:
        if side == Side.NONE:
            raise MatchAmbiguityError("Cannot strip Side.NONE")
        if side in seen:
            raise MatchAmbiguityError(f"Side {side.value} stripped twice")
        seen.add(side)

    r0 = 1 if Side.TOP in seen else 0
    r1 = grid.shape[0] - (1 if Side.BOTTOM in seen else 0)
    c0 = 1 if Side.LEFT in seen else 0
    c1 = grid.shape[1] - (1 if Side.RIGHT in seen else 0)

    if r1 <= r0 or c1 <= c0:
        raise MatchAmbiguityError(
            f"Stripping {sorted(s.value for s in seen)} empties a "
            f"{grid.shape[0]}×{grid.shape[1]} grid"
        )

    return _frozen(grid[r0:r1, c0:c1])


def d4_variants(grid: np.ndarray) -> Iterator[Tuple[str, np.ndarray]]:
    """
    Generate all 8 orientations of a square grid.

    Order:
      id, rot90, rot180, rot270                      (clockwise rotations)
      flip, flip_rot90, flip_rot180, flip_rot270     (flip first, then rotate)

    Symmetric grids yield coinciding variants; they are not deduplicated.

    Yields:
      (op_name: str, transformed_grid: np.ndarray)
    """
    g = grid
    yield "id", g
    for name in ("rot90", "rot180", "rot270"):
        g = rotate90_clockwise(g)
        yield name, g

    g = flip_vertical(grid)
    yield "flip", g
    for name in ("flip_rot90", "flip_rot180", "flip_rot270"):
        g = rotate90_clockwise(g)
        yield name, g
