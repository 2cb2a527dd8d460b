"""
03_match: edge matching between tiles.

Stage: match
Pairwise border comparison over the 8 orientations of one operand, the
all-pairs counting scan, and the breadth-first orientation pass that fixes
one canonical orientation per tile for assembly.
"""

from collections import deque
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple
import importlib.util
import logging

from tile_utils.errors import AssemblyError
from tile_utils.side import Side
from tile_utils.tile import Tile, record_match


def _import_stage_step(stage_name):
    """Helper to import step.py from stages with numeric prefixes."""
    spec = importlib.util.spec_from_file_location(
        f"{stage_name}.step",
        Path(__file__).parent.parent / stage_name / "step.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


_variants = _import_stage_step("02_variants")
all_variants = _variants.all_variants

MODES = ("full", "narrow")


def _side_pairs(mode: str) -> List[Tuple[Side, Side]]:
    """
    (side of a, side of b) pairs the matcher compares.

    full:   a's side S against b's side S.opposite(), for all four S
    narrow: a's Right against b's Right only
    """
    if mode == "full":
        return [(side, side.opposite()) for side in Side.real()]
    if mode == "narrow":
        return [(Side.RIGHT, Side.RIGHT)]
    raise ValueError(f"Unknown matcher mode {mode!r} (expected one of {MODES})")


def find_matching_side(
    a: Tile,
    b: Tile,
    mode: str = "full",
    record: bool = True,
    candidates: Optional[Sequence[Tile]] = None,
) -> Optional[Tuple[Side, Side]]:
    """
    Find a border of `a` (fixed orientation) that equals a border of some
    orientation of `b`.

    Orientations of b are tried in all_variants order (id, rot90, rot180,
    rot270, flip, flip_rot90, flip_rot180, flip_rot270), short-circuiting
    on the first equal border. Borders are compared element-for-element in
    the fixed reading order, never reversed.

    Input:
      a, b: tiles to compare; only b is reoriented
      mode: "full" (4 sides × 8 orientations, geometric adjacency) or
            "narrow" (a's Right vs b's Right across b's orientations)
      record: record the match into both tiles' matches (full mode only;
              narrow hits are never recorded)
      candidates: precomputed orientations of b, e.g. from 02_variants

    Output:
      (side_a, side_b) on success, None otherwise.

    Side effect:
      b.grid is left in the matching orientation, or in the last one tried.
    """
    pairs = _side_pairs(mode)
    if candidates is None:
        candidates = all_variants(b)

    a_borders = {side_a: a.border(side_a) for side_a, _ in pairs}

    for variant in candidates:
        b.grid = variant.grid
        for side_a, side_b in pairs:
            if a_borders[side_a] == variant.border(side_b):
                if record and mode == "full":
                    record_match(a, side_a, b, side_b)
                return side_a, side_b

    return None


def scan(
    tiles: Dict[int, Tile],
    mode: str = "full",
    variants: Optional[Dict[int, List[Tile]]] = None,
    trace: bool = False,
) -> Dict[str, Any]:
    """
    Stage: match (counting pass)

    Tests every ordered pair (t, o), t != o, against a copy of o, so the
    tile collection itself is only read.

    Input:
      tiles: {tile_id: Tile} from 01_present.load
      mode: matcher mode, see find_matching_side
      variants: optional {tile_id: [8 Tiles]} from 02_variants.generate
      trace: if True, log pair and count summaries.

    Output:
      {
        "mode": str,
        "pairs": [(id_a, side_a, id_b, side_b), ...],   # ordered pairs that matched
        "counts": {tile_id: int},                         # matches found from each tile
      }
    """
    _side_pairs(mode)

    if trace:
        logging.info(f"[match] scan() called: mode={mode}, tiles={len(tiles)}")

    ids = sorted(tiles)
    pairs: List[Tuple[int, Side, int, Side]] = []
    counts: Dict[int, int] = {tile_id: 0 for tile_id in ids}

    for a_id in ids:
        a = tiles[a_id]
        for b_id in ids:
            if a_id == b_id:
                continue
            candidates = variants[b_id] if variants is not None else None
            hit = find_matching_side(a, tiles[b_id].copy(), mode=mode, record=False, candidates=candidates)
            if hit is not None:
                side_a, side_b = hit
                pairs.append((a_id, side_a, b_id, side_b))
                counts[a_id] += 1

    if trace:
        hist: Dict[int, int] = {}
        for n in counts.values():
            hist[n] = hist.get(n, 0) + 1
        logging.info(f"[match] {len(pairs)} ordered matching pairs")
        logging.info(f"[match] count histogram {dict(sorted(hist.items()))}")

    return {
        "mode": mode,
        "pairs": pairs,
        "counts": counts,
    }


def orient(tiles: Dict[int, Tile], trace: bool = False) -> Dict[int, Tile]:
    """
    Stage: match (orientation pass for assembly)

    Breadth-first walk from the smallest tile id. The seed keeps its
    current orientation, which becomes the frame for the whole puzzle.
    Each placed tile is matched (full mode) against every other tile:
      - an unplaced tile is probed on a copy; on a hit its matched
        orientation is written to the arena once and it joins the queue
      - a placed tile is only tested in its fixed orientation

    Input:
      tiles: {tile_id: Tile}; not mutated
      trace: if True, log placement progress.

    Output:
      arena: {tile_id: Tile} with canonical grids and recorded matches

    Raises:
      AssemblyError if some tiles are not reachable from the seed
      MatchAmbiguityError if a side would match two different tiles
    """
    if not tiles:
        raise AssemblyError("No tiles to orient")

    ids = sorted(tiles)
    arena = {tile_id: Tile(tile_id, tiles[tile_id].grid) for tile_id in ids}

    if trace:
        logging.info(f"[match] orient() called: seed={ids[0]}, tiles={len(ids)}")

    placed = {ids[0]}
    queue = deque([ids[0]])

    while queue:
        cur = arena[queue.popleft()]
        for other_id in ids:
            if other_id == cur.id:
                continue
            if other_id in {n for n, _ in cur.matches.values()}:
                continue

            other = arena[other_id]
            if other_id in placed:
                find_matching_side(cur, other, mode="full", record=True, candidates=[other.copy()])
                continue

            probe = other.copy()
            hit = find_matching_side(cur, probe, mode="full", record=False)
            if hit is None:
                continue

            arena[other_id] = Tile(other_id, probe.grid, other.matches)
            record_match(cur, hit[0], arena[other_id], hit[1])
            placed.add(other_id)
            queue.append(other_id)

            if trace:
                logging.info(f"[match] placed {other_id} on {cur.id}:{hit[0].value}")

    unplaced = [tile_id for tile_id in ids if tile_id not in placed]
    if unplaced:
        raise AssemblyError(f"{len(unplaced)} tiles not connected to tile {ids[0]}: {unplaced}")

    if trace:
        n_matches = sum(len(t.matches) for t in arena.values()) // 2
        logging.info(f"[match] oriented {len(arena)} tiles, {n_matches} matched seams")

    return arena
