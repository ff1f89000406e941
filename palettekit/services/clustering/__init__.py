"""
palettekit Clustering Engine

Lloyd's algorithm (k-means) over n-dimensional numeric points with a
pluggable distance metric, seedable uniform initialization, explicit
empty-cluster policies and assignment-stability convergence.
"""

from .errors import (
    ClusteringError, EmptyDatasetError, InvalidKError,
    DimensionMismatchError, DegenerateClusterError,
)
from .geometry import (
    DimensionRange, as_dataset, compute_ranges, euclidean, squared_euclidean,
    manhattan, get_metric, pairwise_distances,
)
from .initialization import init_centroids, make_rng
from .assignment import assign_points, clusters_from_assignment
from .update import update_centroids, compute_inertia
from .policies import EmptyClusterPolicy, resolve_empty_clusters
from .convergence import ConvergenceDetector
from .driver import (
    RunStatus, RunOptions, RunState, ClusteringResult,
    start_run, advance_run, finish_run, run_clustering,
)

__all__ = [
    "ClusteringError", "EmptyDatasetError", "InvalidKError",
    "DimensionMismatchError", "DegenerateClusterError",
    "DimensionRange", "as_dataset", "compute_ranges", "euclidean",
    "squared_euclidean", "manhattan", "get_metric", "pairwise_distances",
    "init_centroids", "make_rng", "assign_points", "clusters_from_assignment",
    "update_centroids", "compute_inertia", "EmptyClusterPolicy",
    "resolve_empty_clusters", "ConvergenceDetector", "RunStatus", "RunOptions",
    "RunState", "ClusteringResult", "start_run", "advance_run", "finish_run",
    "run_clustering",
]
