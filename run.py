#!/usr/bin/env python3
"""
run.py — Orchestrator for the tile-assembly solver.

Wires the stages:
  present → variants → match (scan) → corners
  and, with --assemble:  match (orient) → assemble → fixed_point

Zero algorithmic logic; pure sequencing.
"""

import argparse
import logging
from pathlib import Path

# Import stage functions (forward dependencies only)
# Note: Python module names cannot start with digits, so we use importlib
import importlib.util

def _import_stage_step(stage_name):
    """Helper to import step.py from stages with numeric prefixes."""
    spec = importlib.util.spec_from_file_location(
        f"{stage_name}.step",
        Path(__file__).parent / stage_name / "step.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module

# Load stage modules
_present = _import_stage_step("01_present")
_variants = _import_stage_step("02_variants")
_match = _import_stage_step("03_match")
_corners = _import_stage_step("04_corners")
_assemble = _import_stage_step("05_assemble")
_fixed_point = _import_stage_step("06_fixed_point")

# Extract stage functions
load_present = _present.load
generate_variants = _variants.generate
scan_matches = _match.scan
orient_tiles = _match.orient
find_corners = _corners.find
assemble_board = _assemble.assemble
fixed_point_check = _fixed_point.check


def run_puzzle(input_path: str, matcher: str = "full", assemble: bool = False, trace: bool = False):
    """
    Execute the pipeline on one puzzle file.

    Args:
        input_path: path to a text file of "Tile <id>:" blocks
        matcher: "full" or "narrow" (see 03_match.find_matching_side)
        assemble: also orient, assemble and verify the board
        trace: enable debug logging

    Returns:
        result dict with "present", "corners" and, when assembling,
        "arena" and "assembly"

    Raises:
        FileNotFoundError: if the input file does not exist
        FormatError: malformed input
        NoCornersFoundError: no tile has exactly two matches
        AssemblyError / MatchAmbiguityError: inconsistent matches while assembling
    """
    # 1. Load raw puzzle text
    if trace:
        logging.info(f"Loading puzzle from {input_path}")

    input_file = Path(input_path)
    if not input_file.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    puzzle_bundle = {
        "puzzle_id": input_file.stem,
        "raw_text": input_file.read_text(),
    }

    # 2. Execute stages in order
    if trace:
        logging.info("[present] parsing tiles")
    present = load_present(puzzle_bundle, trace=trace)
    tiles = present["tiles"]

    if trace:
        logging.info("[variants] enumerating orientations")
    variants = generate_variants(tiles, trace=trace)

    if trace:
        logging.info(f"[match] scanning all ordered pairs ({matcher} matcher)")
    scan_result = scan_matches(tiles, mode=matcher, variants=variants, trace=trace)

    if trace:
        logging.info("[corners] filtering tiles with exactly two matches")
    corners = find_corners(scan_result, trace=trace)

    result = {
        "present": present,
        "corners": corners,
    }

    if not assemble:
        return result

    if trace:
        logging.info("[match] fixing one orientation per tile")
    arena = orient_tiles(tiles, trace=trace)

    if trace:
        logging.info("[assemble] walking matches into a board")
    assembly = assemble_board(arena, trace=trace)

    if trace:
        logging.info("[fixed_point] re-checking seams")
    fixed_point_check(arena, assembly, trace=trace)

    result["arena"] = arena
    result["assembly"] = assembly
    return result


def _print_tiles(arena):
    for tile_id in sorted(arena):
        tile = arena[tile_id]
        print(f"Tile {tile_id}: {tile!r}")
        for line in tile.rows():
            print(line)
        print()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tile assembly solver — corner product and board composition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py --input data/input.txt
  python run.py --input data/input.txt --assemble --trace
  python run.py --input data/input.txt --matcher narrow
        """,
    )

    parser.add_argument(
        "--input",
        default="data/input.txt",
        help="Path to the puzzle text (default: data/input.txt)",
    )

    parser.add_argument(
        "--matcher",
        choices=("full", "narrow"),
        default="full",
        help="full: all four sides of each tile; narrow: right border only (default: full)",
    )

    parser.add_argument(
        "--assemble",
        action="store_true",
        help="Orient and assemble the board, then print the composite image",
    )

    parser.add_argument(
        "--dump-tiles",
        action="store_true",
        help="Print every tile with its recorded matches (implies --assemble)",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    # Configure logging
    if args.trace:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
        )

    try:
        result = run_puzzle(
            args.input,
            matcher=args.matcher,
            assemble=args.assemble or args.dump_tiles,
            trace=args.trace,
        )

        print(result["corners"]["product"])

        if "assembly" in result:
            print()
            for line in result["assembly"]["rows"]:
                print(line)

        if args.dump_tiles:
            print()
            _print_tiles(result["arena"])

    except Exception as e:
        logging.error(f"Pipeline error: {e}")
        raise


if __name__ == "__main__":
    main()
