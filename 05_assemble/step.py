"""
05_assemble: place oriented tiles on the board and compose the image.

Stage: assemble
Walks Right along matches to the end of a row, then Bottom from the row's
first tile to start the next one. Matched edges are stripped before the
tiles are stitched together.
"""

from typing import Any, Dict, List, Optional
import hashlib
import logging

import numpy as np

from tile_utils.errors import AssemblyError
from tile_utils.grid_utils import render
from tile_utils.side import Side
from tile_utils.tile import Tile


def _start_tile(arena: Dict[int, Tile]) -> Tile:
    """The single tile with neither a Top nor a Left neighbor."""
    starts = [
        t for t in arena.values()
        if Side.TOP not in t.matches and Side.LEFT not in t.matches
    ]
    if len(starts) != 1:
        raise AssemblyError(
            f"Expected exactly one top-left tile, found {len(starts)}: {sorted(t.id for t in starts)}"
        )
    return starts[0]


def _step(arena: Dict[int, Tile], tile: Tile, side: Side) -> Optional[Tile]:
    """
    Neighbor across `side`, or None at the edge of the board.

    The neighbor must touch back with side.opposite(); anything else means
    the tiles were not oriented in one frame.
    """
    if side not in tile.matches:
        return None

    other_id, other_side = tile.matches[side]
    if other_side != side.opposite():
        raise AssemblyError(
            f"Tile {tile.id}:{side.value} matches {other_id}:{other_side.value}, "
            f"expected {side.opposite().value}"
        )
    if other_id not in arena:
        raise AssemblyError(f"Tile {tile.id} matches unknown tile {other_id}")
    return arena[other_id]


def _walk(arena: Dict[int, Tile]) -> List[List[int]]:
    """Row-major layout of tile ids, starting from the top-left tile."""
    layout: List[List[int]] = []
    seen = set()

    row_start: Optional[Tile] = _start_tile(arena)
    while row_start is not None:
        row = []
        cur: Optional[Tile] = row_start
        while cur is not None:
            if cur.id in seen:
                raise AssemblyError(f"Tile {cur.id} reached twice while walking the board")
            seen.add(cur.id)
            row.append(cur.id)
            cur = _step(arena, cur, Side.RIGHT)
        layout.append(row)
        row_start = _step(arena, row_start, Side.BOTTOM)

    widths = sorted({len(row) for row in layout})
    if len(widths) != 1:
        raise AssemblyError(f"Ragged layout, row widths {widths}")

    missing = sorted(set(arena) - seen)
    if missing:
        raise AssemblyError(f"{len(missing)} tiles never placed: {missing}")

    return layout


def assemble(arena: Dict[int, Tile], trace: bool = False) -> Dict[str, Any]:
    """
    Stage: assemble

    Input:
      arena: {tile_id: Tile} from 03_match.orient (one shared frame)
      trace: if True, log the layout shape and a hash of the composite.

    Output:
      assembly: {
        "layout": [[tile_id, ...], ...],   # row-major
        "composite": np.ndarray,           # stitched interiors
        "rows": [str, ...],                # composite as text
        "hash": str,                       # sha256 prefix of the composite
      }

    Raises:
      AssemblyError if the matches do not form one rectangular board
    """
    if trace:
        logging.info(f"[assemble] assemble() called for {len(arena)} tiles")

    if not arena:
        raise AssemblyError("No tiles to assemble")

    layout = _walk(arena)

    interiors = [[arena[tile_id].interior() for tile_id in row] for row in layout]

    # every tile in a row shares its Top/Bottom match status, so heights agree
    try:
        composite = np.vstack([np.hstack(row) for row in interiors])
    except ValueError as e:
        raise AssemblyError(f"Tile interiors do not line up: {e}") from e

    digest = hashlib.sha256(composite.tobytes()).hexdigest()[:16]

    if trace:
        H, W = composite.shape
        logging.info(f"[assemble] layout {len(layout)}×{len(layout[0])}, composite {H}×{W}")
        logging.info(f"[assemble] composite hash={digest}")

    return {
        "layout": layout,
        "composite": composite,
        "rows": render(composite),
        "hash": digest,
    }
