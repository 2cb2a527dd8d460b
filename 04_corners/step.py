"""
04_corners: tiles with exactly two matches, and their id product.

Stage: corners
Builds the directed match graph from the scan and reads corners off the
out-degrees.
"""

from typing import Any, Dict, List
import logging
import math

import igraph as ig

from tile_utils.errors import NoCornersFoundError


def _match_graph(scan_result: Dict[str, Any]) -> ig.Graph:
    """
    Directed graph: one vertex per tile (attribute "tile_id"), one edge
    a -> b per ordered pair where a found a match on b.
    """
    ids = sorted(scan_result["counts"])
    index = {tile_id: v for v, tile_id in enumerate(ids)}

    edges = [(index[id_a], index[id_b]) for id_a, _, id_b, _ in scan_result["pairs"]]

    g = ig.Graph(n=len(ids), edges=edges, directed=True)
    g.vs["tile_id"] = ids
    return g


def find(scan_result: Dict[str, Any], trace: bool = False) -> Dict[str, Any]:
    """
    Stage: corners

    Input:
      scan_result: from 03_match.scan
      trace: if True, log corner ids, product and component count.

    Output:
      {
        "corner_ids": [int, ...],     # sorted
        "product": int,               # product of corner ids
        "counts": {tile_id: int},     # out-degree per tile
        "components": int,            # weakly connected components of the match graph
      }

    Raises:
      NoCornersFoundError if no tile has exactly two matches
    """
    if trace:
        logging.info(f"[corners] find() called (mode={scan_result.get('mode')})")

    g = _match_graph(scan_result)
    degrees = g.outdegree()

    counts = {tile_id: int(d) for tile_id, d in zip(sorted(scan_result["counts"]), degrees)}
    corner_ids: List[int] = sorted(tile_id for tile_id, d in counts.items() if d == 2)
    n_components = len(g.connected_components(mode="weak"))

    if trace:
        logging.info(
            f"[corners] match graph: |V|={g.vcount()}, |E|={g.ecount()}, components={n_components}"
        )

    if not corner_ids:
        raise NoCornersFoundError(
            f"No tile has exactly 2 matches (mode={scan_result.get('mode')}, "
            f"max count={max(counts.values(), default=0)})"
        )

    product = math.prod(corner_ids)

    if trace:
        logging.info(f"[corners] corners={corner_ids} product={product}")

    return {
        "corner_ids": corner_ids,
        "product": product,
        "counts": counts,
        "components": n_components,
    }
