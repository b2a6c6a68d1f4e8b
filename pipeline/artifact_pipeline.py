"""
Edge Signature Pipeline (Phase 1)

Reduces a directory of flag images to flag_edges.json:
- one record per image, id = file stem
- per side, ordered (color, proportion) runs

The search phase only ever reads this file, never the images.
"""

from pathlib import Path
from typing import List, Optional

from features.artifacts import FlagEdges, create_flag_edges, save_flag_edges

EDGES_FILE = "flag_edges.json"


def produce_flag_edges(flags_dir, output_path: Optional[str] = EDGES_FILE,
                       verbose: bool = True) -> List[FlagEdges]:
    """
    Reduce every flag image and optionally save the result.

    Args:
        flags_dir: Directory of flag images
        output_path: Where to write the JSON (None = don't write)
        verbose: Print progress info

    Returns:
        List of FlagEdges in file name order

    Raises:
        FileNotFoundError: If flags_dir is missing
        ValueError: If an image cannot be decoded
    """
    flag_edges = create_flag_edges(flags_dir)

    if verbose:
        for fe in flag_edges:
            print(f"id: {fe.id}")
        print(f"Reduced {len(flag_edges)} flags from {flags_dir}")

    if output_path is not None:
        saved = save_flag_edges(flag_edges, output_path)
        if verbose:
            print(f"Saved: {Path(saved)}")

    return flag_edges
