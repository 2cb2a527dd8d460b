"""
01_present: Load every tile into awareness.

Stage: present
Parses "Tile <id>:" blocks into Tiles with empty match maps.
"""

from typing import Any, Dict, List
import logging
import re

from tile_utils.errors import FormatError
from tile_utils.grid_utils import to_grid
from tile_utils.tile import Tile

_HEADER = re.compile(r"^Tile (\d+):$")
_BLANK = re.compile(r"\n[ \t]*\n")
_ALPHABET = {"#", "."}


def _split_blocks(raw_text: str) -> List[List[str]]:
    """
    Split raw puzzle text into blocks of non-blank lines.

    Blocks are separated by one or more blank (or whitespace-only) lines.
    """
    text = raw_text.replace("\r\n", "\n").strip()
    if not text:
        return []

    blocks = []
    for chunk in _BLANK.split(text):
        lines = [line.strip() for line in chunk.split("\n") if line.strip()]
        if lines:
            blocks.append(lines)
    return blocks


def _parse_block(lines: List[str], block_idx: int) -> Tile:
    """
    Parse one block into a Tile.

    Validates:
    - Header is exactly "Tile <positive int>:"
    - At least one pixel row, rows of equal length, square overall
    - Pixels drawn from '#' and '.'

    Raises:
        FormatError if validation fails
    """
    header = lines[0]
    m = _HEADER.match(header)
    if m is None:
        raise FormatError(f"Block {block_idx}: bad header {header!r} (expected 'Tile <int>:')")

    tile_id = int(m.group(1))
    if tile_id <= 0:
        raise FormatError(f"Block {block_idx}: tile id must be positive, got {tile_id}")

    rows = lines[1:]
    if not rows:
        raise FormatError(f"Tile {tile_id}: no pixel rows")

    for r, row in enumerate(rows):
        bad = set(row) - _ALPHABET
        if bad:
            raise FormatError(f"Tile {tile_id}: row {r} has unexpected characters {sorted(bad)}")

    try:
        grid = to_grid(rows)
    except ValueError as e:
        raise FormatError(f"Tile {tile_id}: {e}") from e

    return Tile(tile_id, grid)


def load(puzzle_bundle: Dict[str, Any], trace: bool = False) -> Dict[str, Any]:
    """
    Stage: present

    Input:
      puzzle_bundle: {
        "puzzle_id": str,
        "raw_text": str   # "Tile <id>:" blocks separated by blank lines
      }
      trace: if True, log tile count and tile size.

    Output:
      present: {
        "puzzle_id": str,
        "tiles": {tile_id: Tile, ...},   # empty match maps
        "tile_size": int,
        "tile_count": int,
      }

    Raises:
      FormatError on any malformed block, duplicate id, empty input or
      tiles of differing size. Nothing is returned for a partially valid input.
    """
    puzzle_id = puzzle_bundle["puzzle_id"]
    raw_text = puzzle_bundle["raw_text"]

    if trace:
        logging.info(f"[present] load() called for puzzle_id={puzzle_id}")

    blocks = _split_blocks(raw_text)
    if not blocks:
        raise FormatError("Puzzle input contains no tiles")

    tiles: Dict[int, Tile] = {}
    for block_idx, lines in enumerate(blocks):
        tile = _parse_block(lines, block_idx)
        if tile.id in tiles:
            raise FormatError(f"Duplicate tile id {tile.id}")
        tiles[tile.id] = tile

    sizes = sorted({t.size for t in tiles.values()})
    if len(sizes) != 1:
        raise FormatError(f"Tiles must all share one size, found sizes {sizes}")

    present = {
        "puzzle_id": puzzle_id,
        "tiles": tiles,
        "tile_size": sizes[0],
        "tile_count": len(tiles),
    }

    if trace:
        logging.info(f"[present] tiles={len(tiles)} size={sizes[0]}×{sizes[0]}")
        logging.info(f"[present] ids={sorted(tiles)}")

    return present
