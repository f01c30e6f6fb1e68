"""Tests for histogram aggregation."""
import numpy as np
import pytest

from hctcalc.color_utils import validate_pixels
from hctcalc.histogram import build_histogram, merge_histograms
from hctcalc.types import InvalidColorComponentError


class TestBuildHistogram:
    """Test pixel counting."""

    def test_counts_distinct_colors(self):
        pixels = [(255, 0, 0), (0, 0, 255), (255, 0, 0), (255, 0, 0)]
        histogram = build_histogram(pixels)

        assert histogram.to_dict() == {0xFF0000FF: 1, 0xFFFF0000: 3}
        assert histogram.total == 4

    def test_colors_sorted(self, rng):
        pixels = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)
        histogram = build_histogram(pixels)

        assert np.all(np.diff(histogram.colors.astype(np.int64)) > 0)
        assert np.all(histogram.counts > 0)
        assert histogram.total == 500

    def test_accepts_image_shaped_array(self):
        image = np.zeros((4, 5, 3), dtype=np.uint8)
        histogram = build_histogram(image)
        assert histogram.to_dict() == {0xFF000000: 20}

    def test_empty(self):
        histogram = build_histogram([])
        assert len(histogram) == 0
        assert histogram.total == 0

    def test_threaded_matches_sequential(self, rng):
        pixels = rng.integers(0, 8, size=(5000, 3), dtype=np.uint8) * 32
        sequential = build_histogram(pixels, workers=1)
        threaded = build_histogram(pixels, workers=4, shard_size=333)

        np.testing.assert_array_equal(sequential.colors, threaded.colors)
        np.testing.assert_array_equal(sequential.counts, threaded.counts)

    def test_permutation_invariant(self, rng):
        pixels = rng.integers(0, 4, size=(1000, 3), dtype=np.uint8) * 80
        shuffled = pixels[rng.permutation(len(pixels))]

        a = build_histogram(pixels, shard_size=128)
        b = build_histogram(shuffled, shard_size=97)
        np.testing.assert_array_equal(a.colors, b.colors)
        np.testing.assert_array_equal(a.counts, b.counts)

    def test_merge_order_irrelevant(self):
        one = (np.array([0xFF000001, 0xFF000003], dtype=np.uint32), np.array([2, 5]))
        two = (np.array([0xFF000002, 0xFF000003], dtype=np.uint32), np.array([1, 1]))

        forward = merge_histograms([one, two])
        backward = merge_histograms([two, one])

        assert forward.to_dict() == backward.to_dict() == {
            0xFF000001: 2, 0xFF000002: 1, 0xFF000003: 6,
        }


class TestValidatePixels:
    """Test input validation."""

    def test_out_of_range(self):
        with pytest.raises(InvalidColorComponentError):
            build_histogram([(0, 0, 256)])

    def test_negative(self):
        with pytest.raises(InvalidColorComponentError):
            build_histogram(np.array([[-1, 0, 0]]))

    def test_wrong_shape(self):
        with pytest.raises(InvalidColorComponentError):
            validate_pixels([(1, 2), (3, 4)])

    def test_fractional(self):
        with pytest.raises(InvalidColorComponentError):
            validate_pixels([(0.5, 0.0, 0.0)])

    def test_whole_floats_accepted(self):
        pixels = validate_pixels([(255.0, 0.0, 10.0)])
        assert pixels.dtype == np.uint8
        assert pixels.tolist() == [[255, 0, 10]]
