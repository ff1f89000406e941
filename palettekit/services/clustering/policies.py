"""
Empty-cluster policies.

After the update step a cluster may own no points, leaving its mean
undefined. The policy chosen for a run decides what happens to that centroid:

- ``remove``: drop it; the run continues with fewer clusters.
- ``reseed_random``: redraw it uniformly inside the dataset bounds.
- ``reseed_nearest``: move the worst-fit point into it as a singleton.
- ``restart_run``: throw the run away and initialize again.
- ``raise``: surface a ``DegenerateClusterError``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

import numpy as np
from loguru import logger

from .errors import DegenerateClusterError
from .geometry import DistanceFn, euclidean, paired_distances
from .initialization import sample_in_bounds


class EmptyClusterPolicy(str, Enum):
    REMOVE = "remove"
    RESEED_RANDOM = "reseed_random"
    RESEED_NEAREST = "reseed_nearest"
    RESTART_RUN = "restart_run"
    RAISE = "raise"

    @classmethod
    def parse(cls, value) -> "EmptyClusterPolicy":
        """Accept an enum member or its value, case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown empty-cluster policy {value!r}. Choose from: {choices}")


class RestartRequested(Exception):
    """Raised by the ``restart_run`` policy; the driver catches it and re-initializes."""

    def __init__(self, empty_clusters: List[int]):
        super().__init__(f"Empty clusters {empty_clusters} require a restart")
        self.empty_clusters = empty_clusters


@dataclass
class Resolution:
    """Centroids and assignment after empty clusters have been dealt with."""
    centroids: np.ndarray
    assignment: np.ndarray
    empty_clusters: List[int]


def _reseed_nearest(dataset: np.ndarray, centroids: np.ndarray, assignment: np.ndarray,
                    counts: np.ndarray, empty: List[int], distance_fn: DistanceFn):
    for j in empty:
        fit = paired_distances(dataset, centroids[assignment], distance_fn)
        # only steal from clusters that keep at least one point
        fit[counts[assignment] < 2] = -np.inf
        stolen = int(np.argmax(fit))
        donor = int(assignment[stolen])

        assignment[stolen] = j
        counts[donor] -= 1
        counts[j] = 1
        centroids[j] = dataset[stolen]
        centroids[donor] = dataset[assignment == donor].mean(axis=0)
        logger.debug(f"Cluster {j} reseeded with point {stolen} taken from cluster {donor}")


def resolve_empty_clusters(dataset: np.ndarray, means: np.ndarray, counts: np.ndarray,
                           assignment: np.ndarray, policy: EmptyClusterPolicy,
                           rng: np.random.Generator,
                           distance_fn: DistanceFn = euclidean) -> Resolution:
    """
    Apply ``policy`` to every cluster with a zero count.

    Args:
        dataset: ``(N, n)`` points
        means: ``(k, n)`` output of the update step (NaN rows for empty clusters)
        counts: ``(k,)`` points per cluster
        assignment: Assignment that produced ``means``
        policy: Policy selected for the run
        rng: Random source used by ``reseed_random``
        distance_fn: Metric used by ``reseed_nearest`` to find the worst-fit point

    Returns:
        Resolution with defined centroids. Under ``remove`` the centroid array is
        shorter and the assignment is renumbered to match.

    Raises:
        RestartRequested: Under ``restart_run`` when any cluster is empty
        DegenerateClusterError: Under ``raise`` when any cluster is empty
    """
    empty = [int(j) for j in np.flatnonzero(counts == 0)]
    centroids = means.copy()
    assignment = assignment.copy()
    if not empty:
        return Resolution(centroids, assignment, empty)

    policy = EmptyClusterPolicy.parse(policy)
    logger.debug(f"{len(empty)} empty cluster(s) {empty}; applying policy '{policy.value}'")

    if policy is EmptyClusterPolicy.RAISE:
        raise DegenerateClusterError(f"Clusters {empty} received no points", empty)

    if policy is EmptyClusterPolicy.RESTART_RUN:
        raise RestartRequested(empty)

    if policy is EmptyClusterPolicy.REMOVE:
        keep = counts > 0
        renumber = np.cumsum(keep) - 1
        return Resolution(centroids[keep], renumber[assignment].astype(np.int64), empty)

    if policy is EmptyClusterPolicy.RESEED_RANDOM:
        centroids[empty] = sample_in_bounds(dataset, len(empty), rng)
        return Resolution(centroids, assignment, empty)

    _reseed_nearest(dataset, centroids, assignment, counts.copy(), empty, distance_fn)
    return Resolution(centroids, assignment, empty)
