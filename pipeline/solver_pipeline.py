"""
Solver Pipeline (Phase 2)

1. Load flag_edges.json -> MultiFlagRegistry -> EdgeIndex
2. Write the membership table (multi_flags.json)
3. Run the search; every new best is written as it is found
4. Reconstruct the best arrangement into a single image
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from core.grid import bounding_box
from core.image_utils import load_image_bgr, resize_exact
from features.artifacts import load_flag_edges
from solvers.edge_index import EdgeIndex
from solvers.registry import build_registry
from solvers.search_engine import SearchConfig, SearchEngine
from solvers.search_state import PlacementGraph
from .persistence import ArrangementStore

# (width, height) of one tile in the rendered image
FLAG_DIMS = (320, 233)

OUTPUT_IMAGE_PREFIX = "output_image_"


def build_engine(edges_path, output_dir=".",
                 config: Optional[SearchConfig] = None) -> SearchEngine:
    """
    Load flag edges and set up a search engine writing into output_dir.

    The membership table is written here, once the seed flag is known to
    be valid and before any search happens.

    Raises:
        FileNotFoundError: If edges_path is missing
        ValueError: If the edges file is malformed or the seed flag is unknown
    """
    config = config or SearchConfig()
    flag_edges = load_flag_edges(edges_path)
    registry = build_registry(flag_edges)

    if config.verbose:
        print(f"{len(flag_edges)} flags -> {len(registry)} multiflags")

    store = ArrangementStore(output_dir)
    engine = SearchEngine(registry, EdgeIndex.from_multiflags(registry.multiflags),
                          config=config, store=store)
    store.save_membership(registry.membership)
    return engine


def solve_flags(edges_path, output_dir=".",
                config: Optional[SearchConfig] = None) -> Optional[PlacementGraph]:
    """
    Complete search: load -> registry -> index -> search.

    Returns:
        Best arrangement found (None when there are no flags)
    """
    return build_engine(edges_path, output_dir, config).run()


def reconstruct_arrangement(graph: PlacementGraph, membership: Dict[str, Set[str]],
                            flags_dir, tile_size: Tuple[int, int] = FLAG_DIMS,
                            verbose: bool = True) -> np.ndarray:
    """
    Composite an arrangement into one BGR image.

    Each placement consumes one flag from its multiflag's membership set.
    Raster row 0 holds the highest graph y.

    Args:
        graph: Arrangement to draw
        membership: multiflag id -> flag ids
        flags_dir: Directory holding <flag_id>.png
        tile_size: (width, height) of each tile

    Returns:
        BGR image of (rows * height, cols * width)

    Raises:
        ValueError: If a multiflag is placed more often than it has flags
    """
    tile_w, tile_h = tile_size
    min_x, max_x, min_y, max_y = bounding_box(graph.cells)
    x_dim, y_dim = max_x - min_x + 1, max_y - min_y + 1

    if verbose:
        print(f"Creating image of {x_dim}x{y_dim} flags")
    output = np.zeros((y_dim * tile_h, x_dim * tile_w, 3), dtype=np.uint8)

    available = {mf_id: sorted(flags, reverse=True) for mf_id, flags in membership.items()}
    flag_count = len(graph.cells)

    for i, ((x, y), mf_id) in enumerate(sorted(graph.cells.items()), start=1):
        pool = available.get(mf_id)
        if not pool:
            raise ValueError(f"No unused flag left for multiflag {mf_id}")
        flag_id = pool.pop()

        col, row = x - min_x, max_y - y
        if verbose:
            print(f"({i}/{flag_count}) Placing {flag_id} at {col} {row}")

        tile = resize_exact(load_image_bgr(Path(flags_dir) / f"{flag_id}.png"), tile_w, tile_h)
        output[row * tile_h:(row + 1) * tile_h, col * tile_w:(col + 1) * tile_w] = tile

    return output


def render_latest(output_dir=".", flags_dir="flags", image_path: Optional[str] = None,
                  tile_size: Tuple[int, int] = FLAG_DIMS,
                  verbose: bool = True) -> Tuple[PlacementGraph, np.ndarray]:
    """
    Render the highest-count arrangement in output_dir.

    Returns:
        graph: The arrangement that was drawn
        image: Rendered BGR image (also written to image_path, or
               output_dir/output_image_<count>.png by default)
    """
    store = ArrangementStore(output_dir)
    path = store.latest_arrangement_path()
    if verbose:
        print(f"Opening file: {path}")

    graph = store.load_arrangement(path)
    membership = store.load_membership()
    image = reconstruct_arrangement(graph, membership, flags_dir, tile_size, verbose)

    if image_path is None:
        image_path = Path(output_dir) / f"{OUTPUT_IMAGE_PREFIX}{graph.placed_count}.png"
    image_path = Path(image_path)
    image_path.parent.mkdir(parents=True, exist_ok=True)

    if verbose:
        print("Saving image...")
    if not cv2.imwrite(str(image_path), image):
        raise ValueError(f"Could not write image: {image_path}")
    if verbose:
        print("Done!")

    return graph, image
