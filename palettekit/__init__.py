"""
palettekit

K-means (Lloyd's algorithm) palette extraction: a generic clustering engine
over n-dimensional points plus a colour layer and HTTP service on top.
"""

from palettekit.services.clustering import (
    EmptyClusterPolicy, ClusteringResult, run_clustering,
)

__version__ = "1.0.0"
__all__ = ["EmptyClusterPolicy", "ClusteringResult", "run_clustering", "__version__"]
