"""Core image and grid utilities."""
from .image_utils import load_image, load_image_bgr, resize_exact
from .grid import SIDES, OPPOSITE, OFFSETS, neighbor, dist_sq, bounding_box
