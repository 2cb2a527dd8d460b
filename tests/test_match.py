#!/usr/bin/env python3
"""
Edge matcher checks for 03_match.

Two matcher modes are exercised on purpose:
  - full (default): all four sides of `a` against the opposite side of
    every orientation of `b`. This is the matcher corner counting and
    assembly rely on.
  - narrow: only a's Right border against b's Right border, as in the
    original single-side comparison. It finds a match only when a's right
    border appears somewhere on b, so on a whole puzzle no tile ever
    reaches two matches (see test_corners_assembly.py).
"""

import importlib.util
from pathlib import Path

import numpy as np
import pytest

from tile_utils.grid_utils import d4_variants, left_col, right_col, rotate90_clockwise, to_grid
from tile_utils.side import Side
from tile_utils.synthetic import make_puzzle
from tile_utils.tile import Tile


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
_match = _import_stage_step("03_match")
find_matching_side = _match.find_matching_side

A_ROWS = [".#.", "...", "..#"]


def _a_and_b():
    a = Tile(1, to_grid(A_ROWS))
    b = Tile(2, rotate90_clockwise(a.grid))
    return a, b


def test_scenario_rotated_copy_full():
    """
    B = A rotated 90° clockwise = ["...", "..#", "#.."].
    B's left column already reads "..#", the same as A's right column,
    so B can sit to the right of A without turning.
    """
    a, b = _a_and_b()
    assert b.rows() == ["...", "..#", "#.."]

    hit = find_matching_side(a, b)

    assert hit == (Side.RIGHT, Side.LEFT)
    assert right_col(a.grid) == left_col(b.grid) == "..#"
    assert a.matches == {Side.RIGHT: (2, Side.LEFT)}
    assert b.matches == {Side.LEFT: (1, Side.RIGHT)}
    print("✅ PASS: A|B matched on A:right / B:left")


def test_scenario_rotated_copy_narrow():
    """Narrow mode turns B three more times, back to A itself."""
    a, b = _a_and_b()

    hit = find_matching_side(a, b, mode="narrow")

    assert hit == (Side.RIGHT, Side.RIGHT)
    assert np.array_equal(b.grid, a.grid)
    # narrow hits are counted, never recorded
    assert a.matches == {} and b.matches == {}
    print("✅ PASS: narrow matcher finds A's right border on B")


def test_no_match_leaves_last_orientation():
    a = Tile(1, to_grid(A_ROWS))
    c = Tile(3, to_grid(["##.", "###", "###"]))
    last = [g for _, g in d4_variants(c.grid)][-1]

    assert find_matching_side(a, c) is None
    assert np.array_equal(c.grid, last)
    assert a.matches == {} and c.matches == {}


def test_record_false_leaves_matches_empty():
    a, b = _a_and_b()
    assert find_matching_side(a, b, record=False) == (Side.RIGHT, Side.LEFT)
    assert a.matches == {} and b.matches == {}


def test_unknown_mode():
    a, b = _a_and_b()
    with pytest.raises(ValueError):
        find_matching_side(a, b, mode="diagonal")


def test_precomputed_candidates():
    a, b = _a_and_b()
    candidates = _variants.all_variants(b)
    hit = find_matching_side(a, b.copy(), record=False, candidates=candidates)
    assert hit == (Side.RIGHT, Side.LEFT)


def test_matcher_symmetry():
    """
    If a finds b with sides (S, S'), then b — kept in its matched
    orientation — finds a with (S', S) without turning a.
    """
    puzzle = make_puzzle(2, 2, size=12, seed=3)
    layout = puzzle["layout"]

    for id_a, id_b in [(layout[0][0], layout[0][1]), (layout[0][0], layout[1][0]), (layout[1][1], layout[0][1])]:
        a = Tile(id_a, puzzle["tiles"][id_a])
        b = Tile(id_b, puzzle["tiles"][id_b])

        hit = find_matching_side(a, b, record=False)
        assert hit is not None
        side_a, side_b = hit
        assert side_b == side_a.opposite()

        a2 = Tile(id_a, a.grid)
        b2 = Tile(id_b, b.grid)
        back = find_matching_side(b2, a2, record=False)

        assert back == (side_b, side_a)
        assert np.array_equal(a2.grid, a.grid)
    print("✅ PASS: matcher is symmetric on neighbor pairs")


def test_scan_counts_full():
    puzzle = make_puzzle(2, 3, size=12, seed=1)
    tiles = {tile_id: Tile(tile_id, grid) for tile_id, grid in puzzle["tiles"].items()}
    before = {tile_id: t.grid for tile_id, t in tiles.items()}

    result = _match.scan(tiles, mode="full", trace=True)

    layout = puzzle["layout"]
    for r, row in enumerate(layout):
        for c, tile_id in enumerate(row):
            neighbors = (r > 0) + (r < len(layout) - 1) + (c > 0) + (c < len(row) - 1)
            assert result["counts"][tile_id] == neighbors

    # scan never reorients or annotates the collection
    for tile_id, t in tiles.items():
        assert t.grid is before[tile_id]
        assert t.matches == {}

    assert len(result["pairs"]) == sum(result["counts"].values())
    assert result["mode"] == "full"


def test_scan_with_variant_table_agrees():
    puzzle = make_puzzle(2, 2, size=12, seed=4)
    tiles = {tile_id: Tile(tile_id, grid) for tile_id, grid in puzzle["tiles"].items()}
    table = _variants.generate(tiles)

    plain = _match.scan(tiles)
    cached = _match.scan(tiles, variants=table)
    assert plain == cached


def test_orient_records_consistent_frame():
    puzzle = make_puzzle(3, 3, size=12, seed=2)
    tiles = {tile_id: Tile(tile_id, grid) for tile_id, grid in puzzle["tiles"].items()}

    arena = _match.orient(tiles, trace=True)

    assert sorted(arena) == sorted(tiles)
    # input collection untouched
    assert all(t.matches == {} for t in tiles.values())

    seed = min(tiles)
    assert np.array_equal(arena[seed].grid, tiles[seed].grid)

    for tile in arena.values():
        for side, (other_id, other_side) in tile.matches.items():
            assert other_side == side.opposite()
            assert tile.border(side) == arena[other_id].border(other_side)
            assert arena[other_id].matches[other_side] == (tile.id, side)

    n_matches = sorted(len(t.matches) for t in arena.values())
    assert n_matches == [2, 2, 2, 2, 3, 3, 3, 3, 4]
    print("✅ PASS: orient() puts every tile in one frame")


if __name__ == "__main__":
    test_scenario_rotated_copy_full()
    test_scenario_rotated_copy_narrow()
    test_no_match_leaves_last_orientation()
    test_record_false_leaves_matches_empty()
    test_unknown_mode()
    test_precomputed_candidates()
    test_matcher_symmetry()
    test_scan_counts_full()
    test_scan_with_variant_table_agrees()
    test_orient_records_consistent_frame()

    print("\n" + "=" * 60)
    print("🎉 ALL MATCH TESTS PASSED!")
    print("=" * 60)
