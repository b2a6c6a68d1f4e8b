"""Low-level image operations."""

import cv2
import numpy as np
from PIL import Image


def load_image(file_path):
    """
    Load image from path and return as numpy array (RGB).

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be decoded as an image
    """
    try:
        with Image.open(file_path) as pic:
            return np.array(pic.convert('RGB'))
    except FileNotFoundError:
        raise
    except OSError as e:
        raise ValueError(f"Could not load image: {file_path} ({e})") from e


def load_image_bgr(file_path):
    """Load image using OpenCV (BGR format)."""
    img = cv2.imread(str(file_path))
    if img is None:
        raise ValueError(f"Could not load image: {file_path}")
    return img


def resize_exact(image, width, height):
    """Resize image to exactly (width, height), ignoring aspect ratio."""
    h, w = image.shape[:2]
    if (w, h) == (width, height):
        return image
    interpolation = cv2.INTER_AREA if w > width else cv2.INTER_CUBIC
    return cv2.resize(image, (width, height), interpolation=interpolation)
