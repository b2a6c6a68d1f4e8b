"""
Border color-run reduction for flag images.

Each border is walked pixel by pixel, every pixel is snapped to the nearest
named palette color, and consecutive runs are reduced to a coarse proportion
of the border length in PROPORTION_DENOM units.
"""

import numpy as np
from typing import List, Tuple

EdgeInfo = List[Tuple[str, int]]

PALETTE = (
    ("Red", (255, 0, 0)),
    ("Green", (0, 255, 0)),
    ("Blue", (0, 0, 255)),
    ("Yellow", (255, 255, 0)),
    ("Cyan", (0, 255, 255)),
    ("Magenta", (255, 0, 255)),
    ("Orange", (255, 128, 0)),
    ("White", (255, 255, 255)),
    ("Black", (0, 0, 0)),
)

PALETTE_NAMES = [name for name, _ in PALETTE]
PALETTE_RGB = np.array([rgb for _, rgb in PALETTE], dtype=np.float32)
BLACK_INDEX = PALETTE_NAMES.index("Black")

# Proportions are expressed in 1/PROPORTION_DENOM of the border length
PROPORTION_DENOM = 24

# A pixel only snaps to Black when every channel is at or below this
BLACK_THRESH = 75


def nearest_color_indices(pixels: np.ndarray) -> np.ndarray:
    """
    Snap an (N, 3) RGB array to palette indices.

    Args:
        pixels: RGB pixels, any integer or float dtype

    Returns:
        (N,) array of indices into PALETTE
    """
    pixels = np.asarray(pixels, dtype=np.float32).reshape(-1, 3)
    d_sq = ((pixels[:, None, :] - PALETTE_RGB[None, :, :]) ** 2).sum(axis=2)

    not_black = (pixels > BLACK_THRESH).any(axis=1)
    d_sq[not_black, BLACK_INDEX] = np.inf

    return np.argmin(d_sq, axis=1)


def nearest_color(pixel) -> str:
    """Name of the palette color closest to a single RGB pixel."""
    return PALETTE_NAMES[int(nearest_color_indices(np.array([pixel]))[0])]


def side_pixels(image: np.ndarray, side: str) -> np.ndarray:
    """
    Border pixels of an RGB image, in reading order.

    top/bottom run left to right, left/right run top to bottom.
    """
    if side == 'top':
        return image[0, :, :3]
    elif side == 'bottom':
        return image[-1, :, :3]
    elif side == 'left':
        return image[:, 0, :3]
    elif side == 'right':
        return image[:, -1, :3]
    raise ValueError(f"Unknown side: {side}")


def to_proportion(count: int, length: int) -> int:
    """Round count/length to PROPORTION_DENOM units, halves rounding up."""
    return int(np.floor(count * PROPORTION_DENOM / length + 0.5))


def build_side_info(pixels: np.ndarray) -> EdgeInfo:
    """
    Run-length encode a border into (color, proportion) pairs.

    Runs whose proportion rounds to zero are dropped.
    """
    indices = nearest_color_indices(pixels)
    length = len(indices)
    if length == 0:
        raise ValueError("Cannot build edge info for an empty border")

    output = []
    run_start = 0
    for i in range(1, length + 1):
        if i == length or indices[i] != indices[run_start]:
            prop = to_proportion(i - run_start, length)
            if prop > 0:
                output.append((PALETTE_NAMES[int(indices[run_start])], prop))
            run_start = i
    return output


def edge_to_id(edge: EdgeInfo) -> str:
    """Canonical border signature: color names and proportions concatenated."""
    return ''.join(f"{color}{prop}" for color, prop in edge)
