"""Color quantization: median-cut partitioning refined by weighted k-means."""
import logging
from typing import Optional

from hctcalc.histogram import build_histogram
from hctcalc.partition import initial_centroids, partition
from hctcalc.refine import MAX_ITERATIONS, refine
from hctcalc.types import DegenerateQuantizationError, EmptyInputError, Histogram, QuantizerResult

logger = logging.getLogger(__name__)


def quantize_histogram(
    histogram: Histogram,
    max_colors: int,
    max_iterations: int = MAX_ITERATIONS,
) -> QuantizerResult:
    """
    Reduce a histogram to at most max_colors representative colors.

    Args:
        histogram: Color histogram
        max_colors: Palette size
        max_iterations: K-means iteration cap

    Returns:
        QuantizerResult whose counts sum to the histogram total

    Raises:
        DegenerateQuantizationError: If max_colors < 1
    """
    if max_colors < 1:
        raise DegenerateQuantizationError(f"max_colors must be >= 1, got {max_colors}")

    boxes = partition(histogram, max_colors)
    centroids = initial_centroids(boxes)
    result = refine(histogram, centroids, max_iterations=max_iterations)

    logger.debug(
        f"Quantized {len(histogram)} distinct colors -> {len(boxes)} boxes -> "
        f"{len(result.color_to_count)} colors in {result.iterations} iterations"
    )
    return result


def quantize(
    pixels,
    max_colors: int,
    max_iterations: int = MAX_ITERATIONS,
    workers: Optional[int] = None,
    shard_size: int = 65536,
) -> QuantizerResult:
    """
    Quantize a pixel sequence into a palette with pixel counts.

    Args:
        pixels: Sequence of RGB triples or an (..., 3) array
        max_colors: Palette size
        max_iterations: K-means iteration cap
        workers: Threads used to build the histogram (None = auto)
        shard_size: Pixels per histogram shard

    Returns:
        QuantizerResult mapping colors to pixel counts

    Raises:
        EmptyInputError: If there are no pixels
        DegenerateQuantizationError: If max_colors < 1
        InvalidColorComponentError: If a channel is outside 0-255
    """
    if max_colors < 1:
        raise DegenerateQuantizationError(f"max_colors must be >= 1, got {max_colors}")

    histogram = build_histogram(pixels, workers=workers, shard_size=shard_size)
    if len(histogram) == 0:
        raise EmptyInputError("Cannot quantize an empty pixel sequence")

    logger.info(f"Quantizing {histogram.total} pixels into {max_colors} colors")
    return quantize_histogram(histogram, max_colors, max_iterations=max_iterations)
