"""Tests for the dominant color pipeline."""
import numpy as np
import pytest

from hctcalc.pipeline import HctPipeline, extract_hct, source_color
from hctcalc.types import (
    DegenerateQuantizationError,
    EmptyInputError,
    ExtractionConfig,
    ImageLoadError,
)


class TestExtractHct:
    """Test the core entry point on pixel sequences."""

    def test_pure_black(self):
        hct = extract_hct(np.zeros((64, 3), dtype=np.uint8), 128)
        assert hct.tone == pytest.approx(0.0, abs=0.5)

    def test_pure_white(self):
        hct = extract_hct(np.full((64, 3), 255, dtype=np.uint8), 128)
        assert hct.tone == pytest.approx(100.0, abs=0.5)
        assert hct.chroma < 3.0

    def test_dominant_hue(self, red_blue_pixels):
        assert source_color(red_blue_pixels, 4) == 0xFFFF0000

        hct = extract_hct(red_blue_pixels, 4)
        assert 20.0 <= hct.hue <= 30.0
        assert hct.chroma > 100.0

    def test_permutation_invariant(self, rng):
        pixels = rng.integers(0, 256, size=(3000, 3), dtype=np.uint8)
        shuffled = pixels[rng.permutation(len(pixels))]

        assert extract_hct(pixels, 32) == extract_hct(shuffled, 32)

    def test_output_ranges(self, rng):
        for _ in range(5):
            pixels = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)
            hct = extract_hct(pixels, 16)
            assert 0.0 <= hct.hue < 360.0
            assert hct.chroma >= 0.0
            assert 0.0 <= hct.tone <= 100.0

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            extract_hct([], 128)

    def test_zero_palette(self, red_blue_pixels):
        with pytest.raises(DegenerateQuantizationError):
            extract_hct(red_blue_pixels, 0)


class TestHctPipeline:
    """Test processing image files."""

    def test_process_image(self, image_file):
        image = np.zeros((40, 40, 3), dtype=np.uint8)
        image[:, :36] = [255, 0, 0]
        image[:, 36:] = [0, 0, 255]

        hct = HctPipeline().process(image_file(image))

        assert 20.0 <= hct.hue <= 30.0
        assert hct.chroma > 100.0

    def test_large_image_is_downsampled(self, image_file):
        image = np.zeros((300, 200, 3), dtype=np.uint8)
        image[:] = [0, 0, 255]

        config = ExtractionConfig(max_colors=16, bitmap_size=16)
        hct = HctPipeline(config).process(image_file(image))

        assert hct.hue == pytest.approx(282.788, abs=0.1)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HctPipeline().process(tmp_path / "missing.png")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(ImageLoadError):
            HctPipeline().process(path)

    def test_process_pixels_uses_config(self, red_blue_pixels):
        config = ExtractionConfig(max_colors=4, workers=1)
        assert HctPipeline(config).process_pixels(red_blue_pixels) == extract_hct(red_blue_pixels, 4)

    def test_exclude_near_gray_from_config(self, image_file):
        image = np.full((10, 10, 3), 255, dtype=np.uint8)
        image[0, :] = [255, 0, 0]
        path = image_file(image, "mostly_white.png")

        plain = HctPipeline(ExtractionConfig()).process(path)
        assert plain.tone == pytest.approx(100.0, abs=0.5)
        assert plain.chroma < 5.0

        config = ExtractionConfig(exclude_near_gray=True, hue_diversity_threshold=30.0)
        vivid = HctPipeline(config).process(path)
        assert vivid.hue == pytest.approx(27.408, abs=0.1)
        assert vivid.chroma > 100.0


class TestExtractionConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = ExtractionConfig()
        assert config.max_colors == 128
        assert config.bitmap_size == 128
        assert config.exclude_near_gray is False

    @pytest.mark.parametrize("kwargs", [
        {"max_colors": 0},
        {"bitmap_size": 0},
        {"max_iterations": 0},
        {"shard_size": 0},
        {"hue_diversity_threshold": 200.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ExtractionConfig(**kwargs)
