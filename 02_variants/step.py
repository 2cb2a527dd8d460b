"""
02_variants: the 8 orientations of every tile.

Stage: variants
Four clockwise rotations, then the same four after a vertical flip.
"""

from typing import Dict, List
import logging

from tile_utils.grid_utils import d4_variants
from tile_utils.tile import Tile


def all_variants(tile: Tile) -> List[Tile]:
    """
    Eight orientations of a tile, starting from its current one.

    Order: id, rot90, rot180, rot270, flip, flip_rot90, flip_rot180, flip_rot270.
    Every variant keeps the tile id and a copy of its matches; the input
    tile is left untouched. Symmetric tiles produce coinciding variants,
    which is fine.
    """
    return [Tile(tile.id, grid, tile.matches) for _, grid in d4_variants(tile.grid)]


def generate(tiles: Dict[int, Tile], trace: bool = False) -> Dict[int, List[Tile]]:
    """
    Stage: variants

    Input:
      tiles: {tile_id: Tile} from 01_present.load
      trace: if True, log how many tiles have fewer than 8 distinct orientations.

    Output:
      {tile_id: [8 variant Tiles]} in all_variants order
    """
    if trace:
        logging.info(f"[variants] generate() called for {len(tiles)} tiles")

    table = {tile_id: all_variants(tiles[tile_id]) for tile_id in sorted(tiles)}

    if trace:
        symmetric = []
        for tile_id, variants in table.items():
            distinct = {v.grid.tobytes() for v in variants}
            if len(distinct) < len(variants):
                symmetric.append((tile_id, len(distinct)))
        logging.info(f"[variants] {len(symmetric)} tiles with repeated orientations: {symmetric}")

    return table
