"""Weighted k-means refinement of a quantized palette."""
import logging
from typing import Dict

import numpy as np
from scipy.spatial.distance import cdist

from hctcalc.color_utils import argb_from_rgb, unpack_colors
from hctcalc.types import DegenerateQuantizationError, Histogram, QuantizerResult

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10


def assign_clusters(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid for every point.

    Uses squared Euclidean RGB distance; equidistant points go to the lowest
    centroid index.
    """
    distances = cdist(points, centroids, metric="sqeuclidean")
    return np.argmin(distances, axis=1)


def weighted_inertia(
    points: np.ndarray,
    weights: np.ndarray,
    centroids: np.ndarray,
    assignments: np.ndarray,
) -> float:
    """Population-weighted sum of squared distances to the assigned centroids."""
    diff = points - centroids[assignments]
    return float(np.sum(weights * np.sum(diff * diff, axis=1)))


def update_centroids(
    points: np.ndarray,
    weights: np.ndarray,
    assignments: np.ndarray,
    centroids: np.ndarray,
) -> np.ndarray:
    """
    Weighted mean of each cluster's members.

    A cluster without members keeps its previous centroid.
    """
    k = centroids.shape[0]
    populations = np.bincount(assignments, weights=weights, minlength=k)
    sums = np.stack(
        [np.bincount(assignments, weights=weights * points[:, c], minlength=k) for c in range(3)],
        axis=-1,
    )
    updated = centroids.copy()
    occupied = populations > 0
    updated[occupied] = sums[occupied] / populations[occupied, None]
    return updated


def refine(
    histogram: Histogram,
    initial_centroids: np.ndarray,
    max_iterations: int = MAX_ITERATIONS,
) -> QuantizerResult:
    """
    Refine starting centroids with weighted k-means.

    Each iteration computes a fresh assignment from the previous centroids
    and then replaces all centroids at once. Iteration stops when no
    assignment changes or after max_iterations.

    Args:
        histogram: Color histogram
        initial_centroids: (k, 3) starting RGB centroids
        max_iterations: Upper bound on iterations

    Returns:
        QuantizerResult mapping each non-empty cluster's rounded centroid to
        the number of pixels assigned to it

    Raises:
        DegenerateQuantizationError: If there are no starting centroids for a
            non-empty histogram
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

    if len(histogram) == 0:
        return QuantizerResult()

    centroids = np.asarray(initial_centroids, dtype=np.float64).reshape(-1, 3)
    if centroids.shape[0] == 0:
        raise DegenerateQuantizationError("Cannot refine without starting centroids")

    # Canonical order so the result only depends on the (color, count) pairs
    order = np.argsort(histogram.colors, kind="stable")
    points = unpack_colors(histogram.colors[order]).astype(np.float64)
    weights = histogram.counts[order].astype(np.float64)

    assignments = None
    history = []
    iterations = 0

    for iteration in range(max_iterations):
        iterations = iteration + 1
        new_assignments = assign_clusters(points, centroids)
        history.append(weighted_inertia(points, weights, centroids, new_assignments))

        if assignments is not None and np.array_equal(new_assignments, assignments):
            logger.debug(f"K-means converged after {iterations} iterations")
            break

        assignments = new_assignments
        centroids = update_centroids(points, weights, assignments, centroids)
    else:
        logger.debug(f"K-means stopped at iteration cap ({max_iterations})")

    populations = np.bincount(
        assignments, weights=histogram.counts[order], minlength=centroids.shape[0]
    ).astype(np.int64)

    color_to_count: Dict[int, int] = {}
    for centroid, population in zip(centroids, populations):
        if population == 0:
            continue
        r, g, b = (int(np.floor(c + 0.5)) for c in centroid)
        argb = argb_from_rgb(r, g, b)
        # Clusters rounding to the same color are merged
        color_to_count[argb] = color_to_count.get(argb, 0) + int(population)

    return QuantizerResult(
        color_to_count=color_to_count,
        inertia_history=history,
        iterations=iterations,
    )
