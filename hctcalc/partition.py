"""Median-cut partitioning of a color histogram."""
import logging
from typing import List, Optional

import numpy as np

from hctcalc.color_utils import unpack_colors
from hctcalc.types import RGB, DegenerateQuantizationError, Histogram

logger = logging.getLogger(__name__)

CHANNEL_NAMES = ("red", "green", "blue")


class PartitionBox:
    """
    Axis-aligned region of the RGB cube.

    A box covers the entries order[lo:hi] of the partition's backing arrays
    and caches their population-weighted moments.
    """
    __slots__ = ("lo", "hi", "count", "sums", "sums_sq", "mins", "maxs")

    def __init__(self, lo: int, hi: int, rgb: np.ndarray, counts: np.ndarray):
        self.lo = lo
        self.hi = hi
        weights = counts[:, None]
        self.count = int(counts.sum())
        self.sums = (rgb * weights).sum(axis=0)
        self.sums_sq = (rgb * rgb * weights).sum(axis=0)
        self.mins = rgb.min(axis=0)
        self.maxs = rgb.max(axis=0)

    def __len__(self) -> int:
        return self.hi - self.lo

    def __repr__(self) -> str:
        return f"PartitionBox(lo={self.lo}, hi={self.hi}, count={self.count})"

    @property
    def longest_axis(self) -> int:
        """Channel with the widest value range; ties go to the lower channel."""
        return int(np.argmax(self.maxs - self.mins))

    def channel_range(self, axis: int) -> int:
        return int(self.maxs[axis] - self.mins[axis])

    def variance(self, axis: Optional[int] = None) -> float:
        """Population-weighted sum of squared deviations along one channel."""
        if axis is None:
            axis = self.longest_axis
        if self.count == 0:
            return 0.0
        s = float(self.sums[axis])
        return float(self.sums_sq[axis]) - s * s / self.count

    def splittable(self) -> bool:
        return len(self) > 1 and self.channel_range(self.longest_axis) > 0

    @property
    def representative(self) -> RGB:
        """Count-weighted average color of the box, rounded."""
        mean = self.sums / self.count
        r, g, b = (int(np.floor(c + 0.5)) for c in mean)
        return (r, g, b)


class Partition:
    """
    Median-cut state: sorted backing arrays plus the arena of boxes.

    Boxes only store index ranges; splitting a box reorders its slice of
    `order` in place, which never touches entries outside the box.
    """

    def __init__(self, histogram: Histogram):
        self.argb = histogram.colors.astype(np.int64)
        self.rgb = unpack_colors(histogram.colors)
        self.counts = histogram.counts.astype(np.int64)
        self.order = np.arange(len(histogram), dtype=np.int64)
        self.boxes: List[PartitionBox] = []

    def make_box(self, lo: int, hi: int) -> PartitionBox:
        idx = self.order[lo:hi]
        return PartitionBox(lo, hi, self.rgb[idx], self.counts[idx])

    def select(self) -> Optional[int]:
        """Index of the splittable box with the largest variance, first one on ties."""
        best = None
        best_variance = -1.0
        for i, box in enumerate(self.boxes):
            if not box.splittable():
                continue
            variance = box.variance()
            if variance > best_variance:
                best = i
                best_variance = variance
        return best

    def split(self, index: int) -> None:
        """Split a box at the weighted median of its longest axis."""
        box = self.boxes[index]
        axis = box.longest_axis
        lo, hi = box.lo, box.hi

        idx = self.order[lo:hi]
        # Stable order on (channel value, full color value)
        idx = idx[np.lexsort((self.argb[idx], self.rgb[idx, axis]))]
        self.order[lo:hi] = idx

        cumulative = np.cumsum(self.counts[idx])
        median = int(np.searchsorted(cumulative, cumulative[-1] / 2.0))
        # Both halves must be non-empty
        cut = lo + min(max(median + 1, 1), len(idx) - 1)

        left = self.make_box(lo, cut)
        right = self.make_box(cut, hi)
        self.boxes[index] = left
        self.boxes.append(right)

        logger.debug(
            f"Split box {index} on {CHANNEL_NAMES[axis]}: "
            f"{len(left)} colors ({left.count} px) | {len(right)} colors ({right.count} px)"
        )


def partition(histogram: Histogram, max_colors: int) -> List[PartitionBox]:
    """
    Split a histogram into at most max_colors boxes by median cut.

    Args:
        histogram: Color histogram
        max_colors: Maximum number of boxes

    Returns:
        Boxes in creation order. Empty if the histogram is empty.

    Raises:
        DegenerateQuantizationError: If max_colors < 1
    """
    if max_colors < 1:
        raise DegenerateQuantizationError(f"max_colors must be >= 1, got {max_colors}")

    state = Partition(histogram)
    n_colors = len(histogram)
    if n_colors == 0:
        return []

    if n_colors <= max_colors:
        # One box per distinct color, no splitting needed
        state.boxes = [state.make_box(i, i + 1) for i in range(n_colors)]
        return state.boxes

    state.boxes.append(state.make_box(0, n_colors))
    while len(state.boxes) < max_colors:
        index = state.select()
        if index is None:
            break
        state.split(index)

    logger.debug(f"Median cut: {n_colors} colors -> {len(state.boxes)} boxes")
    return state.boxes


def initial_centroids(boxes: List[PartitionBox]) -> np.ndarray:
    """Representative colors of the boxes as a (k, 3) float array."""
    if not boxes:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array([box.representative for box in boxes], dtype=np.float64)
