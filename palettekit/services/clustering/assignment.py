"""
Assignment step: map every point to its nearest centroid.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np
from loguru import logger

from .geometry import DistanceFn, euclidean, pairwise_distances


def _nearest(points: np.ndarray, centroids: np.ndarray, distance_fn: DistanceFn) -> np.ndarray:
    distances = pairwise_distances(points, centroids, distance_fn)
    # argmin returns the first minimum, so equidistant centroids resolve to the lowest index
    return np.argmin(distances, axis=1).astype(np.int64)


def assign_points(dataset: np.ndarray, centroids: np.ndarray,
                  distance_fn: DistanceFn = euclidean,
                  workers: Optional[int] = None) -> np.ndarray:
    """
    Assign each point to the index of its closest centroid.

    Args:
        dataset: ``(N, n)`` points
        centroids: ``(k, n)`` centroids, read only here
        distance_fn: Symmetric dissimilarity between two points
        workers: If greater than 1, score contiguous chunks of the dataset on a
            thread pool and join them before returning

    Returns:
        ``(N,)`` int64 array of cluster indices in ``[0, k)``

    Raises:
        DimensionMismatchError: If centroids and points differ in width
    """
    n_points = len(dataset)
    if not workers or workers <= 1 or n_points < 2:
        return _nearest(dataset, centroids, distance_fn)

    n_chunks = min(workers, n_points)
    bounds = np.linspace(0, n_points, n_chunks + 1, dtype=int)
    chunks = [dataset[bounds[i]:bounds[i + 1]] for i in range(n_chunks)]
    logger.debug(f"Assigning {n_points} points across {n_chunks} workers")

    with ThreadPoolExecutor(max_workers=n_chunks) as pool:
        parts = list(pool.map(lambda chunk: _nearest(chunk, centroids, distance_fn), chunks))

    return np.concatenate(parts)


def clusters_from_assignment(assignment: np.ndarray, k: int):
    """List of dataset-index arrays, one per cluster index (empty arrays for empty clusters)."""
    return [np.flatnonzero(assignment == j) for j in range(k)]
