"""
palettekit v1 API Routes
Palette extraction and raw clustering endpoints.
"""
from fastapi import APIRouter, HTTPException

from palettekit.schemas import (
    ClusterRequest, ClusterResponse, ErrorResponse, PaletteRequest, PaletteResponse,
)
from palettekit.services.clustering import ClusteringError, DegenerateClusterError
from palettekit.services.colors.extract_api import handle_cluster_request, handle_palette_request

router = APIRouter(prefix="/v1", tags=["Clustering"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid samples, k or limits"},
    422: {"model": ErrorResponse, "description": "Empty cluster could not be resolved"},
}


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, DegenerateClusterError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


@router.post("/palette",
             response_model=PaletteResponse,
             responses=_ERROR_RESPONSES,
             summary="Extract Palette",
             description="Reduce RGB colour samples to a dominance-ordered palette")
def extract_palette(request: PaletteRequest) -> PaletteResponse:
    try:
        return handle_palette_request(request)
    except (ClusteringError, ValueError) as e:
        raise _to_http_error(e)


@router.post("/cluster",
             response_model=ClusterResponse,
             responses=_ERROR_RESPONSES,
             summary="Cluster Points",
             description="Run k-means over arbitrary n-dimensional points")
def cluster_points(request: ClusterRequest) -> ClusterResponse:
    try:
        return handle_cluster_request(request)
    except (ClusteringError, ValueError) as e:
        raise _to_http_error(e)
