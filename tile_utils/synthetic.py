"""
Synthetic puzzles with a known answer.

A random '#'/'.' canvas is cut into overlapping size×size tiles, so two
neighbors share their seam row or column exactly. Every tile is then given
a random 4-digit id and a random orientation out of the 8 D4 variants.
"""

from collections import defaultdict
from typing import Any, Dict, Tuple

import numpy as np

from tile_utils.grid_utils import borders, d4_variants, render


def _borders_unique(cells: Dict[Tuple[int, int], np.ndarray]) -> bool:
    """
    True when border readings only coincide across true seams.

    Each tile must expose 8 distinct readings (4 sides × 2 directions), a
    reading may be shared by at most two tiles, those two tiles must be
    grid neighbors, and a neighbor pair shares nothing but its seam.
    """
    owners = defaultdict(set)
    for pos, g in cells.items():
        readings = []
        for _, s in borders(g):
            readings.append(s)
            readings.append(s[::-1])
        if len(set(readings)) != 8:
            return False
        for s in readings:
            owners[s].add(pos)

    shared = defaultdict(int)
    for who in owners.values():
        if len(who) > 2:
            return False
        if len(who) == 2:
            (i1, j1), (i2, j2) = sorted(who)
            if abs(i1 - i2) + abs(j1 - j2) != 1:
                return False
            shared[((i1, j1), (i2, j2))] += 1

    # seam forward + seam reversed
    return all(n == 2 for n in shared.values())


def make_puzzle(rows: int, cols: int, size: int = 24, seed: int = 0,
                max_attempts: int = 100) -> Dict[str, Any]:
    """
    Build a rows×cols puzzle of size×size tiles.

    Output:
      {
        "text": puzzle in the "Tile <id>:" block format,
        "tiles": {id: scrambled grid},
        "layout": [[id, ...], ...]   # true arrangement, row-major
        "corner_ids": sorted ids of the corner tiles,
        "composite": canvas with seam rows/cols removed (what matched-edge
                     stripping reconstructs, up to a global D4 orientation),
      }

    Raises:
      ValueError for non-positive dimensions or tiles smaller than 3×3
      RuntimeError if no canvas with unique borders is found
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"Puzzle must be at least 1×1, got {rows}×{cols}")
    if size < 3:
        raise ValueError(f"Tile size must be >= 3, got {size}")

    rng = np.random.default_rng(seed)
    step = size - 1
    alphabet = np.array(["#", "."], dtype="<U1")

    for _ in range(max_attempts):
        canvas = rng.choice(alphabet, size=(rows * step + 1, cols * step + 1))
        cells = {
            (i, j): canvas[i * step:i * step + size, j * step:j * step + size]
            for i in range(rows)
            for j in range(cols)
        }
        if _borders_unique(cells):
            break
    else:
        raise RuntimeError(f"No {rows}×{cols} canvas with unique borders after {max_attempts} attempts")

    ids = rng.choice(np.arange(1000, 10000), size=rows * cols, replace=False)
    layout = [[int(ids[i * cols + j]) for j in range(cols)] for i in range(rows)]

    tiles: Dict[int, np.ndarray] = {}
    for (i, j), g in cells.items():
        variants = [v for _, v in d4_variants(g)]
        tiles[layout[i][j]] = variants[int(rng.integers(len(variants)))]

    order = [layout[i][j] for i in range(rows) for j in range(cols)]
    order = [order[k] for k in rng.permutation(len(order))]
    text = "\n\n".join(
        f"Tile {tile_id}:\n" + "\n".join(render(tiles[tile_id]))
        for tile_id in order
    ) + "\n"

    corner_ids = sorted({layout[0][0], layout[0][-1], layout[-1][0], layout[-1][-1]})

    seam_rows = [k * step for k in range(1, rows)]
    seam_cols = [k * step for k in range(1, cols)]
    composite = np.delete(np.delete(canvas, seam_rows, axis=0), seam_cols, axis=1)

    return {
        "text": text,
        "tiles": tiles,
        "layout": layout,
        "corner_ids": corner_ids,
        "composite": composite,
    }
