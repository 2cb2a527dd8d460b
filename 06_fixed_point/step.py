"""
06_fixed_point: re-see the assembled board.

Stage: fixed_point
Every seam on the board must agree pixel for pixel, and the recorded
matches must be exactly the board's adjacencies.
"""

from typing import Any, Dict, Set, Tuple
import logging

from tile_utils.errors import AssemblyError
from tile_utils.side import Side
from tile_utils.tile import Tile


def _layout_seams(layout) -> Set[Tuple[int, Side, int, Side]]:
    seams = set()
    for r, row in enumerate(layout):
        for c, tile_id in enumerate(row):
            if c + 1 < len(row):
                seams.add((tile_id, Side.RIGHT, row[c + 1], Side.LEFT))
                seams.add((row[c + 1], Side.LEFT, tile_id, Side.RIGHT))
            if r + 1 < len(layout):
                below = layout[r + 1][c]
                seams.add((tile_id, Side.BOTTOM, below, Side.TOP))
                seams.add((below, Side.TOP, tile_id, Side.BOTTOM))
    return seams


def check(arena: Dict[int, Tile], assembly: Dict[str, Any], trace: bool = False) -> None:
    """
    Stage: fixed_point

    Input:
      arena: from 03_match.orient
      assembly: from 05_assemble.assemble
      trace: if True, log the number of seams verified.

    Output:
      None.

    Raises:
      AssemblyError if a seam's borders differ, or if recorded matches and
      layout adjacencies disagree
    """
    if trace:
        logging.info("[fixed_point] check() called")

    layout = assembly["layout"]
    seams = _layout_seams(layout)

    for id_a, side_a, id_b, side_b in seams:
        if arena[id_a].border(side_a) != arena[id_b].border(side_b):
            raise AssemblyError(
                f"Seam {id_a}:{side_a.value} / {id_b}:{side_b.value} borders differ"
            )

    recorded = {
        (tile_id, side, other_id, other_side)
        for tile_id, tile in arena.items()
        for side, (other_id, other_side) in tile.matches.items()
    }

    if recorded != seams:
        extra = sorted((a, s.value, b, t.value) for a, s, b, t in recorded - seams)
        missing = sorted((a, s.value, b, t.value) for a, s, b, t in seams - recorded)
        raise AssemblyError(f"Matches disagree with layout: extra={extra} missing={missing}")

    if trace:
        logging.info(f"[fixed_point] {len(seams) // 2} seams verified, board is stable")
