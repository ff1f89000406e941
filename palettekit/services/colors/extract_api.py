"""
Palette API Orchestrator

Coordinates a palette or raw clustering request: limit checks, clustering,
response assembly, timings, metrics and request-scoped logging.
"""

import time

from palettekit.config import config
from palettekit.schemas import ClusterRequest, ClusterResponse, PaletteRequest, PaletteResponse
from palettekit.services.clustering import ClusteringError, get_metric, run_clustering
from palettekit.services.colors.extraction import cluster_palette
from palettekit.utils.ids import generate_request_id
from palettekit.utils.logging import get_logger
from palettekit.utils.metrics import get_metrics


def _check_limits(n_points: int, k: int):
    if n_points > config.MAX_SAMPLES:
        raise ValueError(f"Too many points: {n_points} > {config.MAX_SAMPLES}")
    if not config.validate_k(k):
        raise ValueError(f"k must be between 1 and {config.MAX_K}, got {k}")


def _record_outcome(result, policy: str, duration_ms: float):
    metrics = get_metrics()
    metrics.record_run(result.iterations_used, result.converged, result.restarts)
    metrics.record_timing("cluster", duration_ms)
    if result.empty_cluster_events:
        metrics.increment_empty_cluster_count(policy, result.empty_cluster_events)


def handle_palette_request(request: PaletteRequest) -> PaletteResponse:
    """
    Build a palette from the request's RGB samples.

    Raises:
        ClusteringError: For invalid samples, k, or an unresolvable empty cluster
        ValueError: For requests beyond configured limits
    """
    request_id = generate_request_id("pal")
    log = get_logger()
    extra = {"request_id": request_id}
    start_time = time.time()

    log.info(f"Palette request: {len(request.samples)} samples, k={request.k}", extra=extra)
    try:
        _check_limits(len(request.samples), request.k)
        palette, result = cluster_palette(
            request.samples,
            k=request.k,
            rng_seed=request.seed,
            color_space=request.color_space,
            empty_cluster_policy=request.empty_cluster_policy,
            max_iterations=request.max_iterations,
            tolerance=request.tolerance,
            max_restarts=config.MAX_RESTARTS,
            n_init=request.n_init,
            workers=config.WORKERS,
        )
    except (ClusteringError, ValueError) as e:
        get_metrics().increment_failure_count(type(e).__name__)
        log.warning(f"Palette request rejected: {e}", extra=extra)
        raise

    cluster_ms = (time.time() - start_time) * 1000
    _record_outcome(result, request.empty_cluster_policy.value, cluster_ms)
    if not result.converged:
        log.warning(f"Palette returned without convergence after {result.iterations_used} iterations",
                    extra=extra)

    log.info(f"Palette complete: {len(palette)} colours in {cluster_ms:.1f} ms", extra=extra)
    return PaletteResponse(
        request_id=request_id,
        k=result.k,
        sampled=len(result.assignment),
        color_space=request.color_space,
        palette=palette,
        converged=result.converged,
        iterations_used=result.iterations_used,
        inertia=result.inertia,
        restarts=result.restarts,
        status=result.status.value,
        assignment=result.assignment.tolist() if request.include_assignment else None,
        timings_ms={"cluster": round(cluster_ms, 3)},
    )


def handle_cluster_request(request: ClusterRequest) -> ClusterResponse:
    """Cluster arbitrary n-dimensional points and return centroids and assignment."""
    request_id = generate_request_id("clu")
    log = get_logger()
    extra = {"request_id": request_id}
    start_time = time.time()

    log.info(f"Cluster request: {len(request.points)} points, k={request.k}, metric={request.metric}",
             extra=extra)
    try:
        _check_limits(len(request.points), request.k)
        result = run_clustering(
            request.points,
            request.k,
            distance_fn=get_metric(request.metric),
            empty_cluster_policy=request.empty_cluster_policy,
            max_iterations=request.max_iterations,
            random_seed=request.seed,
            tolerance=request.tolerance,
            max_restarts=config.MAX_RESTARTS,
            n_init=request.n_init,
            workers=config.WORKERS,
        )
    except (ClusteringError, ValueError) as e:
        get_metrics().increment_failure_count(type(e).__name__)
        log.warning(f"Cluster request rejected: {e}", extra=extra)
        raise

    cluster_ms = (time.time() - start_time) * 1000
    _record_outcome(result, request.empty_cluster_policy.value, cluster_ms)

    payload = result.to_dict()
    return ClusterResponse(
        request_id=request_id,
        k=payload["k"],
        centroids=payload["centroids"],
        assignment=payload["assignment"],
        cluster_sizes=payload["cluster_sizes"],
        converged=payload["converged"],
        iterations_used=payload["iterations_used"],
        inertia=payload["inertia"],
        restarts=payload["restarts"],
        status=payload["status"],
        timings_ms={"cluster": round(cluster_ms, 3)},
    )
