"""Grid geometry for the 4-connected placement grid (y grows upward)."""

from typing import Tuple

Coord = Tuple[int, int]

# Side order used everywhere a 4-tuple of signatures appears
SIDES = ('top', 'right', 'bottom', 'left')

# Order in which the frontier scan visits the sides of an occupied cell
FRONTIER_SCAN_ORDER = ('top', 'right', 'left', 'bottom')

OPPOSITE = {
    'top': 'bottom',
    'right': 'left',
    'bottom': 'top',
    'left': 'right',
}

OFFSETS = {
    'top': (0, 1),
    'right': (1, 0),
    'bottom': (0, -1),
    'left': (-1, 0),
}


def validate_side(side: str) -> str:
    """Raise ValueError for anything that is not one of SIDES."""
    if side not in OFFSETS:
        raise ValueError(f"Unknown side: {side}")
    return side


def neighbor(loc: Coord, side: str) -> Coord:
    """Coordinate adjacent to `loc` across `side`."""
    dx, dy = OFFSETS[validate_side(side)]
    return (loc[0] + dx, loc[1] + dy)


def dist_sq(loc: Coord) -> int:
    """Squared euclidean distance from the origin."""
    return loc[0] ** 2 + loc[1] ** 2


def bounding_box(locs) -> Tuple[int, int, int, int]:
    """
    Bounding box of a collection of coordinates.

    The origin is always included, matching how arrangements grow from (0, 0).

    Returns:
        (min_x, max_x, min_y, max_y)
    """
    min_x = max_x = min_y = max_y = 0
    for x, y in locs:
        min_x, max_x = min(min_x, x), max(max_x, x)
        min_y, max_y = min(min_y, y), max(max_y, y)
    return min_x, max_x, min_y, max_y
