"""Pixel histogram aggregation."""
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from hctcalc.color_utils import pack_pixels, validate_pixels
from hctcalc.types import Histogram

logger = logging.getLogger(__name__)


def _count_shard(shard: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Pack one shard of pixels and count its distinct colors."""
    return np.unique(pack_pixels(shard), return_counts=True)


def merge_histograms(partials: List[Tuple[np.ndarray, np.ndarray]]) -> Histogram:
    """
    Merge partial (colors, counts) histograms into one.

    The result is sorted by color, so the order of the partials does not
    matter.
    """
    partials = [(colors, counts) for colors, counts in partials if len(colors) > 0]
    if not partials:
        return Histogram(
            colors=np.zeros(0, dtype=np.uint32),
            counts=np.zeros(0, dtype=np.int64),
        )

    colors = np.concatenate([c for c, _ in partials])
    counts = np.concatenate([n for _, n in partials]).astype(np.int64)

    unique_colors, inverse = np.unique(colors, return_inverse=True)
    merged_counts = np.zeros(len(unique_colors), dtype=np.int64)
    np.add.at(merged_counts, inverse.ravel(), counts)

    return Histogram(colors=unique_colors.astype(np.uint32), counts=merged_counts)


def build_histogram(
    pixels,
    workers: Optional[int] = None,
    shard_size: int = 65536,
) -> Histogram:
    """
    Count the distinct colors of a pixel sequence.

    Pixels are split into shards that are packed and counted on worker
    threads; the partial histograms are merged in the calling thread.

    Args:
        pixels: Sequence of RGB triples or an (..., 3) array
        workers: Number of worker threads (None = auto, 1 = no threads)
        shard_size: Pixels per shard

    Returns:
        Histogram with colors in ascending order

    Raises:
        InvalidColorComponentError: If a channel is outside 0-255
    """
    array = validate_pixels(pixels)
    n_pixels = array.shape[0]
    if n_pixels == 0:
        return merge_histograms([])

    shards = [array[i:i + shard_size] for i in range(0, n_pixels, shard_size)]

    if workers is None:
        workers = min(os.cpu_count() or 1, len(shards))
    else:
        workers = max(1, min(workers, len(shards)))

    if workers > 1:
        logger.debug(f"Counting {n_pixels} pixels in {len(shards)} shards using {workers} threads")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            partials = list(executor.map(_count_shard, shards))
    else:
        partials = [_count_shard(shard) for shard in shards]

    histogram = merge_histograms(partials)
    logger.debug(f"Histogram: {n_pixels} pixels, {len(histogram)} distinct colors")
    return histogram
