"""Image loading and downsampling."""
import logging
import math
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from hctcalc.types import ImageLoadError

logger = logging.getLogger(__name__)


def calculate_optimal_size(width: int, height: int, bitmap_size: int) -> Tuple[int, int]:
    """
    Size that fits the image into bitmap_size**2 pixels, keeping aspect ratio.

    Images that already fit are left at their original size.

    Args:
        width: Image width
        height: Image height
        bitmap_size: Edge of the square sample budget

    Returns:
        (new_width, new_height), each at least 1
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    image_area = float(width * height)
    bitmap_area = float(bitmap_size ** 2)
    scale = min(math.sqrt(bitmap_area / image_area), 1.0)

    new_width = max(int(math.floor(width * scale + 0.5)), 1)
    new_height = max(int(math.floor(height * scale + 0.5)), 1)

    logger.debug(f"Resizing from {width}x{height} to {new_width}x{new_height} (scale: {scale:.2f})")
    return new_width, new_height


def sample_image(img: Image.Image, bitmap_size: int) -> np.ndarray:
    """
    Downsample a decoded image and return its pixels.

    Returns:
        (N, 3) uint8 array of RGB pixels
    """
    img = img.convert("RGB")
    width, height = img.size
    new_width, new_height = calculate_optimal_size(width, height, bitmap_size)

    if (new_width, new_height) != (width, height):
        logger.info(f"Resizing image to {new_width}x{new_height} for processing")
        img = img.resize((new_width, new_height), Image.Resampling.BICUBIC)

    pixels = np.asarray(img, dtype=np.uint8).reshape(-1, 3)
    logger.debug(f"Processing image with {len(pixels)} pixels")
    return pixels


def load_pixels(path: Union[str, Path], bitmap_size: int) -> np.ndarray:
    """
    Decode an image file and sample its pixels.

    Args:
        path: Path to image file
        bitmap_size: Edge of the square sample budget

    Returns:
        (N, 3) uint8 array of RGB pixels

    Raises:
        FileNotFoundError: If file doesn't exist
        ImageLoadError: If file cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise ImageLoadError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)
            return sample_image(img, bitmap_size)
    except (IOError, OSError) as e:
        raise ImageLoadError(f"Failed to load image {path}: {e}") from e
