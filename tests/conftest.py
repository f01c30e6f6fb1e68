"""Pytest configuration and fixtures."""
import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def red_blue_pixels():
    """100 pixels, 90% pure red and 10% pure blue."""
    return np.array([(255, 0, 0)] * 90 + [(0, 0, 255)] * 10, dtype=np.uint8)


@pytest.fixture
def image_file(tmp_path):
    """Factory writing an image array to a PNG file."""
    def _write(array, name="image.png"):
        path = tmp_path / name
        Image.fromarray(np.asarray(array, dtype=np.uint8)).save(path)
        return path
    return _write
