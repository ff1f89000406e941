"""
palettekit API Schemas
Pydantic models for palette and clustering request/response validation.
"""
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from palettekit.config import config
from palettekit.services.clustering.policies import EmptyClusterPolicy


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palettekit", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class ClusteringParams(BaseModel):
    """Parameters shared by palette and raw clustering requests."""
    k: int = Field(config.DEFAULT_K, ge=1, description="Number of clusters")
    seed: Optional[int] = Field(config.DEFAULT_SEED, description="Random seed; null draws fresh entropy")
    empty_cluster_policy: EmptyClusterPolicy = Field(
        EmptyClusterPolicy.parse(config.EMPTY_CLUSTER_POLICY),
        description="How clusters that receive no points are resolved"
    )
    max_iterations: int = Field(config.MAX_ITERATIONS, ge=1, le=10000, description="Iteration cap per run")
    tolerance: Optional[float] = Field(
        config.TOLERANCE, gt=0.0,
        description="Also stop once no centroid moves this far (disabled when null)"
    )
    n_init: int = Field(config.N_INIT, ge=1, le=20, description="Independent runs; lowest inertia wins")


# ============================================================================
# PALETTE SCHEMAS
# ============================================================================

class PaletteRequest(ClusteringParams):
    """Palette extraction from decoded RGB samples."""
    samples: List[List[float]] = Field(
        ...,
        description="RGB samples as [r, g, b] triples with channels in 0-255"
    )
    color_space: Literal["rgb", "lab"] = Field("rgb", description="Space the samples are clustered in")
    include_assignment: bool = Field(False, description="Return the cluster index of every sample")


class ColorEntry(BaseModel):
    """Single palette colour with its dominance."""
    hex: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$", description="Hex colour code #RRGGBB")
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="8-bit RGB triple")
    ratio: float = Field(..., ge=0.0, le=1.0, description="Share of samples in this cluster")
    count: int = Field(..., ge=0, description="Number of samples in this cluster")
    cluster_index: int = Field(..., ge=0, description="Index of the centroid in the clustering result")


class PaletteResponse(BaseModel):
    """Palette extraction response."""
    request_id: str
    k: int = Field(..., description="Effective palette size")
    sampled: int = Field(..., description="Number of samples clustered")
    color_space: str
    palette: List[ColorEntry] = Field(..., description="Colours ordered by dominance, descending")
    converged: bool
    iterations_used: int
    inertia: float = Field(..., description="Within-cluster sum of squared distances")
    restarts: int
    status: str
    assignment: Optional[List[int]] = Field(None, description="Cluster index per sample, if requested")
    timings_ms: Dict[str, float] = Field(default_factory=dict)


# ============================================================================
# RAW CLUSTERING SCHEMAS
# ============================================================================

class ClusterRequest(ClusteringParams):
    """Clustering of arbitrary n-dimensional points."""
    points: List[List[float]] = Field(..., description="Points of equal dimensionality")
    metric: Literal["euclidean", "squared_euclidean", "manhattan"] = Field(
        "euclidean", description="Distance metric for the assignment step"
    )


class ClusterResponse(BaseModel):
    """Raw clustering response."""
    request_id: str
    k: int
    centroids: List[List[float]]
    assignment: List[int]
    cluster_sizes: List[int]
    converged: bool
    iterations_used: int
    inertia: float
    restarts: int
    status: str
    timings_ms: Dict[str, float] = Field(default_factory=dict)
