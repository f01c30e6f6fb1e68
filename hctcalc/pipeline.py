"""Dominant color pipeline: sample, quantize, score, convert to HCT."""
import logging
from pathlib import Path
from typing import Optional, Union

from hctcalc.color_utils import hex_from_argb
from hctcalc.hct import to_hct
from hctcalc.quantize import quantize
from hctcalc.refine import MAX_ITERATIONS
from hctcalc.sampler import load_pixels
from hctcalc.score import score
from hctcalc.types import (
    DegenerateQuantizationError,
    EmptyInputError,
    ExtractionConfig,
    Hct,
)

logger = logging.getLogger(__name__)


def source_color(
    pixels,
    max_colors: int = 128,
    max_iterations: int = MAX_ITERATIONS,
    exclude_near_gray: bool = False,
    hue_diversity_threshold: float = 15.0,
    workers: Optional[int] = None,
    shard_size: int = 65536,
) -> int:
    """
    Most representative color of a pixel sequence, as packed ARGB.

    Raises:
        EmptyInputError: If there are no pixels
        DegenerateQuantizationError: If max_colors < 1
        InvalidColorComponentError: If a channel is outside 0-255
    """
    if max_colors < 1:
        raise DegenerateQuantizationError(f"max_colors must be >= 1, got {max_colors}")

    result = quantize(
        pixels,
        max_colors,
        max_iterations=max_iterations,
        workers=workers,
        shard_size=shard_size,
    )
    logger.debug(f"Quantization produced {len(result.color_to_count)} colors")

    ranked = score(
        result.color_to_count,
        want_count=1,
        exclude_near_gray=exclude_near_gray,
        hue_diversity_threshold=hue_diversity_threshold,
    )
    if not ranked:
        raise EmptyInputError("Quantization produced no colors")

    logger.debug(f"Top scored color: {hex_from_argb(ranked[0])}")
    return ranked[0]


def extract_hct(pixels, max_colors: int = 128, **kwargs) -> Hct:
    """
    HCT of the most representative color of a pixel sequence.

    Args:
        pixels: Sequence of RGB triples or an (..., 3) array
        max_colors: Palette size used for quantization
        **kwargs: Forwarded to source_color

    Returns:
        Hct of the top-ranked palette color

    Raises:
        EmptyInputError: If there are no pixels
        DegenerateQuantizationError: If max_colors < 1
        InvalidColorComponentError: If a channel is outside 0-255
    """
    hct = to_hct(source_color(pixels, max_colors, **kwargs))
    logger.info(f"Calculated HCT values: H{hct.hue:.1f} C{hct.chroma:.1f} T{hct.tone:.1f}")
    return hct


class HctPipeline:
    """Image file to dominant HCT color."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize pipeline with configuration.

        Args:
            config: Extraction configuration. Uses defaults if None.
        """
        self.config = config or ExtractionConfig()

    def process(self, image_path: Union[str, Path]) -> Hct:
        """
        Compute the dominant HCT color of an image.

        Raises:
            FileNotFoundError: If input file doesn't exist
            HctError: If the image cannot be decoded or has no pixels
        """
        logger.info(f"Processing image: {image_path}")
        pixels = load_pixels(image_path, self.config.bitmap_size)
        return self.process_pixels(pixels)

    def process_pixels(self, pixels) -> Hct:
        config = self.config
        return extract_hct(
            pixels,
            config.max_colors,
            max_iterations=config.max_iterations,
            exclude_near_gray=config.exclude_near_gray,
            hue_diversity_threshold=config.hue_diversity_threshold,
            workers=config.workers,
            shard_size=config.shard_size,
        )
