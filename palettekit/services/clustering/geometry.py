"""
Geometry helpers for the clustering engine.

Dataset coercion, per-dimension ranges and the built-in distance metrics.
A distance metric is any symmetric callable ``(a, b) -> float``. The built-in
ones also register a vectorized pairwise form that the assignment step uses
to score every point against every centroid in one numpy call.
"""

import math
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

import numpy as np

from .errors import DimensionMismatchError, EmptyDatasetError

DistanceFn = Callable[[Sequence[float], Sequence[float]], float]
PairwiseFn = Callable[[np.ndarray, np.ndarray], np.ndarray]


class DimensionRange(NamedTuple):
    """Observed bounds of one dimension."""
    min: float
    max: float


def as_dataset(points) -> np.ndarray:
    """
    Coerce ``points`` to a read-only ``(N, n)`` float64 array.

    Args:
        points: Any sequence of equal-length numeric sequences, or a 2-D array

    Returns:
        A new array whose ``writeable`` flag is cleared

    Raises:
        EmptyDatasetError: If there are no points
        DimensionMismatchError: If points differ in length or have zero components
        ValueError: If any component is NaN or infinite
    """
    if isinstance(points, np.ndarray):
        if points.ndim != 2:
            if points.size == 0:
                raise EmptyDatasetError("Dataset contains no points")
            raise DimensionMismatchError(f"Expected a 2-D array of points, got shape {points.shape}")
        if points.shape[0] == 0:
            raise EmptyDatasetError("Dataset contains no points")
        data = np.array(points, dtype=np.float64, copy=True)
    else:
        rows = [list(p) for p in points]
        if not rows:
            raise EmptyDatasetError("Dataset contains no points")
        n = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != n:
                raise DimensionMismatchError(
                    f"Point {i} has {len(row)} components, expected {n}"
                )
        data = np.array(rows, dtype=np.float64)

    if data.shape[1] == 0:
        raise DimensionMismatchError("Points must have at least one component")
    if not np.all(np.isfinite(data)):
        raise ValueError("Dataset contains NaN or infinite values")

    data.flags.writeable = False
    return data


def compute_ranges(dataset) -> List[DimensionRange]:
    """Per-dimension ``(min, max)`` across all points."""
    data = np.asarray(dataset, dtype=np.float64)
    if data.size == 0:
        raise EmptyDatasetError("Cannot compute ranges of an empty dataset")
    if data.ndim != 2:
        raise DimensionMismatchError(f"Expected an (N, n) array of points, got shape {data.shape}")
    mins = data.min(axis=0)
    maxs = data.max(axis=0)
    return [DimensionRange(float(lo), float(hi)) for lo, hi in zip(mins, maxs)]


def _check_same_length(a, b):
    if len(a) != len(b):
        raise DimensionMismatchError(
            f"Cannot compare points of dimension {len(a)} and {len(b)}"
        )


def euclidean(a, b) -> float:
    """Euclidean distance ``sqrt(sum((b_i - a_i)^2))``."""
    _check_same_length(a, b)
    return math.sqrt(sum((float(y) - float(x)) ** 2 for x, y in zip(a, b)))


def squared_euclidean(a, b) -> float:
    """Squared Euclidean distance; orders points exactly like ``euclidean``."""
    _check_same_length(a, b)
    return sum((float(y) - float(x)) ** 2 for x, y in zip(a, b))


def manhattan(a, b) -> float:
    """City-block distance ``sum(|b_i - a_i|)``."""
    _check_same_length(a, b)
    return sum(abs(float(y) - float(x)) for x, y in zip(a, b))


def _pairwise_squared(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    diff = points[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def _pairwise_euclidean(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    return np.sqrt(_pairwise_squared(points, centroids))


def _pairwise_manhattan(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    return np.abs(points[:, np.newaxis, :] - centroids[np.newaxis, :, :]).sum(axis=2)


_PAIRWISE: Dict[DistanceFn, PairwiseFn] = {
    euclidean: _pairwise_euclidean,
    squared_euclidean: _pairwise_squared,
    manhattan: _pairwise_manhattan,
}

METRICS: Dict[str, DistanceFn] = {
    "euclidean": euclidean,
    "squared_euclidean": squared_euclidean,
    "manhattan": manhattan,
}


def get_metric(name: str) -> DistanceFn:
    """Look up a built-in metric by name."""
    try:
        return METRICS[name]
    except KeyError:
        raise ValueError(f"Unknown distance metric: {name!r}. Choose from {sorted(METRICS)}")


def pairwise_distances(points: np.ndarray, centroids: np.ndarray,
                       distance_fn: DistanceFn = euclidean) -> np.ndarray:
    """
    Distance from every point to every centroid, shape ``(len(points), len(centroids))``.

    Custom metrics fall back to one call per (point, centroid) pair.
    """
    if points.shape[1] != centroids.shape[1]:
        raise DimensionMismatchError(
            f"Points have {points.shape[1]} components but centroids have {centroids.shape[1]}"
        )
    vectorized: Optional[PairwiseFn] = _PAIRWISE.get(distance_fn)
    if vectorized is not None:
        return vectorized(points, centroids)

    out = np.empty((points.shape[0], centroids.shape[0]), dtype=np.float64)
    for i, point in enumerate(points):
        for j, centroid in enumerate(centroids):
            out[i, j] = distance_fn(point, centroid)
    return out


_PAIRED: Dict[DistanceFn, PairwiseFn] = {
    euclidean: lambda a, b: np.sqrt(np.einsum("ij,ij->i", a - b, a - b)),
    squared_euclidean: lambda a, b: np.einsum("ij,ij->i", a - b, a - b),
    manhattan: lambda a, b: np.abs(a - b).sum(axis=1),
}


def paired_distances(a: np.ndarray, b: np.ndarray, distance_fn: DistanceFn = euclidean) -> np.ndarray:
    """Row-wise distances ``distance_fn(a[i], b[i])``, shape ``(len(a),)``."""
    if a.shape != b.shape:
        raise DimensionMismatchError(f"Cannot pair arrays of shape {a.shape} and {b.shape}")
    vectorized = _PAIRED.get(distance_fn)
    if vectorized is not None:
        return vectorized(a, b)
    return np.array([distance_fn(x, y) for x, y in zip(a, b)], dtype=np.float64)
