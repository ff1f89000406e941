"""
Centroid initialization: uniform draws inside the dataset's bounding box.
"""

from numbers import Integral
from typing import Optional

import numpy as np

from .errors import InvalidKError
from .geometry import compute_ranges


def make_rng(random_seed: Optional[int] = None,
             rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng`` if given, else a generator seeded with ``random_seed`` (fresh entropy when None)."""
    if rng is not None:
        return rng
    return np.random.default_rng(random_seed)


def validate_k(k, n_points: int) -> int:
    """Check ``1 <= k <= n_points`` and return k as a plain int."""
    if isinstance(k, bool) or not isinstance(k, Integral):
        raise InvalidKError(f"k must be an integer, got {k!r}")
    if k < 1 or k > n_points:
        raise InvalidKError(f"k must be in [1, {n_points}], got {k}")
    return int(k)


def sample_in_bounds(dataset: np.ndarray, count: int, rng: np.random.Generator) -> np.ndarray:
    """Draw ``count`` points, each component uniform in that dimension's [min, max]."""
    ranges = compute_ranges(dataset)
    low = np.array([r.min for r in ranges])
    high = np.array([r.max for r in ranges])
    return rng.uniform(low, high, size=(count, len(ranges)))


def init_centroids(dataset: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Produce ``k`` initial centroids.

    Positions are drawn independently per dimension, not picked from the
    dataset, so duplicate positions are possible and left in place.

    Args:
        dataset: ``(N, n)`` array of points
        k: Number of clusters
        rng: Random source; seed it for reproducible runs

    Returns:
        Mutable ``(k, n)`` float64 array

    Raises:
        InvalidKError: If k is not in ``[1, N]``
    """
    k = validate_k(k, len(dataset))
    return sample_in_bounds(dataset, k, rng)
