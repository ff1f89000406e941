"""
Update step: move each centroid to the mean of its cluster.
"""

from typing import Tuple

import numpy as np


def update_centroids(dataset: np.ndarray, assignment: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Component-wise mean of the points assigned to each cluster.

    Args:
        dataset: ``(N, n)`` points
        assignment: ``(N,)`` cluster index per point
        k: Number of clusters

    Returns:
        Tuple of:
        - means: ``(k, n)`` array; rows of empty clusters are NaN (undefined)
        - counts: ``(k,)`` number of points per cluster
    """
    n_features = dataset.shape[1]
    counts = np.bincount(assignment, minlength=k)[:k]
    sums = np.zeros((k, n_features), dtype=np.float64)
    np.add.at(sums, assignment, dataset)

    means = np.full((k, n_features), np.nan, dtype=np.float64)
    filled = counts > 0
    means[filled] = sums[filled] / counts[filled, np.newaxis]
    return means, counts


def compute_inertia(dataset: np.ndarray, centroids: np.ndarray, assignment: np.ndarray) -> float:
    """Within-cluster sum of squared Euclidean distances to the assigned centroid."""
    residuals = dataset - centroids[assignment]
    return float(np.einsum("ij,ij->", residuals, residuals))
