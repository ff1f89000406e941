"""
Lloyd's algorithm driver.

A run is an explicit ``RunState`` record owned by the caller. ``start_run``
creates and initializes it, ``advance_run`` performs iterations (all of them,
or a bounded batch so callers can check progress between batches) and
``finish_run`` turns it into a ``ClusteringResult``. ``run_clustering`` wires
the three together and is the usual entry point.

State machine::

    uninitialized -> initialized -> iterating -> converged
                          ^             |     -> max_iterations_reached
                          +-- restart --+
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
from loguru import logger

from .assignment import assign_points
from .convergence import ConvergenceDetector
from .errors import DegenerateClusterError
from .geometry import DistanceFn, as_dataset, euclidean
from .initialization import init_centroids, make_rng, validate_k
from .policies import EmptyClusterPolicy, RestartRequested, resolve_empty_clusters
from .update import compute_inertia, update_centroids


class RunStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


TERMINAL_STATUSES = (RunStatus.CONVERGED, RunStatus.MAX_ITERATIONS_REACHED)


@dataclass
class RunOptions:
    """Per-run settings; the empty-cluster policy is fixed for the whole run."""
    distance_fn: DistanceFn = euclidean
    empty_cluster_policy: EmptyClusterPolicy = EmptyClusterPolicy.RESEED_NEAREST
    max_iterations: int = 300
    tolerance: Optional[float] = None
    max_restarts: int = 10
    workers: Optional[int] = None

    def __post_init__(self):
        self.empty_cluster_policy = EmptyClusterPolicy.parse(self.empty_cluster_policy)
        if not callable(self.distance_fn):
            raise ValueError("distance_fn must be callable")
        if isinstance(self.max_iterations, bool) or int(self.max_iterations) != self.max_iterations \
                or self.max_iterations < 1:
            raise ValueError(f"max_iterations must be a positive integer, got {self.max_iterations!r}")
        if self.max_restarts < 0:
            raise ValueError(f"max_restarts must be >= 0, got {self.max_restarts}")


@dataclass
class RunState:
    """Mutable state of one run. Centroids and assignment are replaced wholesale each iteration."""
    dataset: np.ndarray
    k: int
    rng: np.random.Generator
    centroids: Optional[np.ndarray] = None
    # assignment derived from the current centroids, None until first computed
    assignment: Optional[np.ndarray] = None
    iteration: int = 0
    status: RunStatus = RunStatus.UNINITIALIZED
    restarts: int = 0
    empty_cluster_events: int = 0
    inertia_history: List[float] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass
class ClusteringResult:
    """Final centroids and assignment of a run plus how it ended."""
    centroids: np.ndarray
    assignment: np.ndarray
    converged: bool
    iterations_used: int
    inertia: float
    status: RunStatus
    restarts: int = 0
    empty_cluster_events: int = 0
    inertia_history: List[float] = field(default_factory=list)

    @property
    def k(self) -> int:
        """Effective number of clusters (smaller than requested only under the ``remove`` policy)."""
        return len(self.centroids)

    def cluster_sizes(self) -> List[int]:
        return np.bincount(self.assignment, minlength=self.k).tolist()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "centroids": self.centroids.tolist(),
            "assignment": self.assignment.tolist(),
            "converged": self.converged,
            "iterations_used": self.iterations_used,
            "inertia": self.inertia,
            "status": self.status.value,
            "restarts": self.restarts,
            "k": self.k,
            "cluster_sizes": self.cluster_sizes(),
        }


def initialize_run(state: RunState) -> RunState:
    """Draw fresh centroids and reset per-attempt progress."""
    state.centroids = init_centroids(state.dataset, state.k, state.rng)
    state.assignment = None
    state.iteration = 0
    state.inertia_history = []
    state.status = RunStatus.INITIALIZED
    return state


def start_run(dataset, k: int, random_seed: Optional[int] = None,
              rng: Optional[np.random.Generator] = None) -> RunState:
    """
    Validate inputs and create an initialized run.

    Raises:
        EmptyDatasetError: If ``dataset`` has no points
        DimensionMismatchError: If points differ in length
        InvalidKError: If k is not in ``[1, len(dataset)]``
    """
    data = as_dataset(dataset)
    k = validate_k(k, len(data))
    state = RunState(dataset=data, k=k, rng=make_rng(random_seed, rng))
    return initialize_run(state)


def _restart(state: RunState, options: RunOptions, empty: List[int]):
    if state.restarts >= options.max_restarts:
        raise DegenerateClusterError(
            f"Clusters {empty} still empty after {state.restarts} restarts", empty
        )
    state.restarts += 1
    state.status = RunStatus.UNINITIALIZED
    logger.info(f"Restarting run ({state.restarts}/{options.max_restarts}) after empty clusters {empty}")
    initialize_run(state)


def step_run(state: RunState, options: RunOptions, detector: ConvergenceDetector) -> RunState:
    """One assignment -> update -> convergence check cycle."""
    if state.status is RunStatus.UNINITIALIZED:
        initialize_run(state)
    state.status = RunStatus.ITERATING

    assignment = state.assignment
    if assignment is None:
        assignment = assign_points(state.dataset, state.centroids, options.distance_fn, options.workers)

    means, counts = update_centroids(state.dataset, assignment, len(state.centroids))
    try:
        resolution = resolve_empty_clusters(
            state.dataset, means, counts, assignment,
            options.empty_cluster_policy, state.rng, options.distance_fn,
        )
    except RestartRequested as exc:
        state.empty_cluster_events += len(exc.empty_clusters)
        _restart(state, options, exc.empty_clusters)
        return state

    if resolution.empty_clusters:
        state.empty_cluster_events += len(resolution.empty_clusters)

    previous_centroids = state.centroids
    state.centroids = resolution.centroids
    state.iteration += 1
    state.inertia_history.append(compute_inertia(state.dataset, state.centroids, resolution.assignment))

    # the assignment induced by the new centroids doubles as the next iteration's assignment step
    state.assignment = assign_points(state.dataset, state.centroids, options.distance_fn, options.workers)
    if detector.centroids_unchanged(previous_centroids, state.centroids):
        # only equidistant points (duplicates) changed index; the resolved partition is the fixed point
        state.assignment = resolution.assignment

    # a reseeded centroid that captured no point is not a converged partition
    vacant = np.bincount(resolution.assignment, minlength=len(state.centroids)) == 0
    if not vacant.any() and detector.has_converged(resolution.assignment, state.assignment,
                                                   previous_centroids, state.centroids):
        state.status = RunStatus.CONVERGED
    elif state.iteration >= options.max_iterations:
        state.status = RunStatus.MAX_ITERATIONS_REACHED
    logger.debug(
        f"Iteration {state.iteration}: k={len(state.centroids)}, "
        f"inertia={state.inertia_history[-1]:.4f}, status={state.status.value}"
    )
    return state


def advance_run(state: RunState, options: RunOptions, max_steps: Optional[int] = None,
                detector: Optional[ConvergenceDetector] = None) -> RunState:
    """
    Iterate until the run terminates or ``max_steps`` iterations have been attempted.

    Returns the same ``state`` so callers can inspect ``state.status`` between batches.
    """
    detector = detector or ConvergenceDetector(options.tolerance)
    steps = 0
    while not state.done and (max_steps is None or steps < max_steps):
        step_run(state, options, detector)
        steps += 1
    return state


def finish_run(state: RunState) -> ClusteringResult:
    """Package a terminated run as a result."""
    if not state.done:
        raise RuntimeError(f"Run has not terminated (status={state.status.value})")
    return ClusteringResult(
        centroids=state.centroids.copy(),
        assignment=state.assignment.copy(),
        converged=state.status is RunStatus.CONVERGED,
        iterations_used=state.iteration,
        inertia=compute_inertia(state.dataset, state.centroids, state.assignment),
        status=state.status,
        restarts=state.restarts,
        empty_cluster_events=state.empty_cluster_events,
        inertia_history=list(state.inertia_history),
    )


def run_clustering(dataset, k: int,
                   distance_fn: DistanceFn = euclidean,
                   empty_cluster_policy=EmptyClusterPolicy.RESEED_NEAREST,
                   max_iterations: int = 300,
                   random_seed: Optional[int] = None,
                   *,
                   tolerance: Optional[float] = None,
                   max_restarts: int = 10,
                   n_init: int = 1,
                   workers: Optional[int] = None,
                   rng: Optional[np.random.Generator] = None) -> ClusteringResult:
    """
    Cluster ``dataset`` into ``k`` groups with Lloyd's algorithm.

    Args:
        dataset: Sequence of equal-length numeric points (or an ``(N, n)`` array)
        k: Number of clusters, ``1 <= k <= len(dataset)``
        distance_fn: Symmetric dissimilarity used to assign points
        empty_cluster_policy: ``EmptyClusterPolicy`` member or its string value
        max_iterations: Cap on iterations per attempt; reaching it is not an error
        random_seed: Seed for the initializer; identical seeds give identical runs
        tolerance: Also stop once no centroid moves this far (None disables)
        max_restarts: Cap on re-initializations under ``restart_run``
        n_init: Number of independent runs; the lowest-inertia result is kept
        workers: Thread count for the assignment step (None or 1 runs serially)
        rng: Explicit generator; takes precedence over ``random_seed``

    Returns:
        ClusteringResult

    Raises:
        EmptyDatasetError, InvalidKError, DimensionMismatchError: For invalid input
        DegenerateClusterError: Under the ``raise`` policy, or when ``restart_run``
            exhausts ``max_restarts``
    """
    options = RunOptions(
        distance_fn=distance_fn,
        empty_cluster_policy=empty_cluster_policy,
        max_iterations=max_iterations,
        tolerance=tolerance,
        max_restarts=max_restarts,
        workers=workers,
    )
    if n_init < 1:
        raise ValueError(f"n_init must be >= 1, got {n_init}")

    generator = make_rng(random_seed, rng)
    start_time = time.time()
    best: Optional[ClusteringResult] = None

    for attempt in range(n_init):
        state = start_run(dataset, k, rng=generator)
        if attempt == 0:
            logger.info(
                f"Starting clustering: {len(state.dataset)} points, n={state.dataset.shape[1]}, "
                f"k={state.k}, policy={options.empty_cluster_policy.value}"
            )
        result = finish_run(advance_run(state, options))
        if best is None or result.inertia < best.inertia:
            best = result

    elapsed_ms = (time.time() - start_time) * 1000
    if best.converged:
        logger.info(
            f"Clustering converged in {best.iterations_used} iterations "
            f"(inertia={best.inertia:.4f}, {elapsed_ms:.1f} ms)"
        )
    else:
        logger.warning(
            f"Clustering stopped at max_iterations={max_iterations} without converging "
            f"(inertia={best.inertia:.4f})"
        )
    return best
