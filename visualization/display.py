"""Display utilities for flag arrangements."""

import cv2
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional

from solvers.search_state import PlacementGraph


def _to_rgb(image: np.ndarray) -> np.ndarray:
    if len(image.shape) == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    return image


def _title(placed_count: Optional[int], title: str) -> str:
    if placed_count is not None:
        return f"{title} ({placed_count} flags)"
    return title


def display_arrangement(image: np.ndarray, placed_count: Optional[int] = None,
                        title: str = "Arrangement", figsize: tuple = (12, 8)):
    """
    Show a rendered arrangement.

    Args:
        image: Rendered BGR image
        placed_count: Optional flag count for the title
        title: Figure title
        figsize: Figure size
    """
    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(_to_rgb(image))
    ax.set_title(_title(placed_count, title))
    ax.axis('off')

    plt.tight_layout()
    plt.show()


def save_arrangement_preview(image: np.ndarray, output_path: str,
                             placed_count: Optional[int] = None,
                             title: str = "Arrangement", dpi: int = 150) -> Path:
    """Save a titled preview of a rendered arrangement."""
    fig, ax = plt.subplots(1, 1, figsize=(12, 8))
    ax.imshow(_to_rgb(image))
    ax.set_title(_title(placed_count, title))
    ax.axis('off')

    plt.tight_layout()

    output_path = Path(output_path)
    output_dir = output_path.parent
    if output_dir and str(output_dir) != '.':
        output_dir.mkdir(parents=True, exist_ok=True)

    plt.savefig(output_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return output_path


def plot_occupancy(graph: PlacementGraph, ax=None, annotate: bool = True):
    """
    Scatter the occupied cells of an arrangement in graph coordinates.

    Cells are labelled with a small per-multiflag index so repeated
    multiflags are easy to spot.

    Returns:
        The matplotlib Axes drawn on
    """
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(6, 6))

    labels = {}
    for mf_id in graph.cells.values():
        labels.setdefault(mf_id, len(labels))

    if graph.cells:
        xs, ys = zip(*graph.cells.keys())
        colors = [labels[mf_id] for mf_id in graph.cells.values()]
        ax.scatter(xs, ys, c=colors, cmap='tab20', marker='s', s=200)

    if annotate:
        for (x, y), mf_id in graph.cells.items():
            ax.annotate(str(labels[mf_id]), (x, y), ha='center', va='center', fontsize=8)

    ax.set_aspect('equal')
    ax.set_title(f"Occupancy ({graph.placed_count} flags)")
    return ax
