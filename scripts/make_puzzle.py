#!/usr/bin/env python3
"""Write a synthetic puzzle with a known corner product to a text file."""

import argparse
import math
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tile_utils.synthetic import make_puzzle


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic tile puzzle")
    parser.add_argument("--rows", type=int, default=3)
    parser.add_argument("--cols", type=int, default=3)
    parser.add_argument("--size", type=int, default=24, help="tile side length (default: 24)")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--out", default="data/input.txt")
    args = parser.parse_args()

    puzzle = make_puzzle(args.rows, args.cols, size=args.size, seed=args.seed)

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(puzzle["text"])

    print(f"Wrote {args.rows}×{args.cols} puzzle of {args.size}×{args.size} tiles to {out}")
    print(f"Corners: {puzzle['corner_ids']}")
    print(f"Expected product: {math.prod(puzzle['corner_ids'])}")
    print("Layout:")
    for row in puzzle["layout"]:
        print("  " + " ".join(str(tile_id) for tile_id in row))


if __name__ == "__main__":
    main()
