"""
Error types raised by the clustering engine.

All input errors derive from both ``ClusteringError`` and ``ValueError`` so
callers can catch either. Non-convergence is not an error: it is reported on
the result with ``converged=False``.
"""


class ClusteringError(Exception):
    """Base class for clustering failures."""


class EmptyDatasetError(ClusteringError, ValueError):
    """The dataset contains zero points."""


class InvalidKError(ClusteringError, ValueError):
    """k is not an integer in ``[1, len(dataset)]``."""


class DimensionMismatchError(ClusteringError, ValueError):
    """Points (or centroids) do not share one dimensionality."""


class DegenerateClusterError(ClusteringError, RuntimeError):
    """An empty cluster could not be resolved under the selected policy."""

    def __init__(self, message: str, cluster_indices=None):
        super().__init__(message)
        self.cluster_indices = list(cluster_indices or [])
