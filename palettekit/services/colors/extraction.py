"""
Colour palette extraction.

Reduces decoded colour samples (RGB triples in 0-255) to a palette using the
clustering engine. Samples can be clustered in RGB directly or in CIE L*a*b*;
centroids are always reported back as 8-bit RGB.
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from ..clustering import (
    ClusteringResult, DimensionMismatchError, EmptyClusterPolicy, InvalidKError,
    as_dataset, run_clustering,
)


def rgb_to_hex(rgb_u8) -> str:
    """Convert an RGB triple to a ``#RRGGBB`` string."""
    r, g, b = [int(x) for x in rgb_u8]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert a ``#RRGGBB`` string to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Expected a 6-digit hex colour, got {hex_color!r}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def validate_samples(samples) -> np.ndarray:
    """
    Coerce colour samples to a read-only ``(N, 3)`` float64 array.

    Raises:
        EmptyDatasetError: If there are no samples
        DimensionMismatchError: If samples are not RGB triples
        ValueError: If any channel is outside [0, 255]
    """
    rgb = as_dataset(samples)
    if rgb.shape[1] != 3:
        raise DimensionMismatchError(f"Colour samples must have 3 channels, got {rgb.shape[1]}")
    if rgb.min() < 0 or rgb.max() > 255:
        raise ValueError("Colour channels must lie in [0, 255]")
    return rgb


def to_color_space(rgb: np.ndarray, color_space: str = "rgb") -> np.ndarray:
    """Map RGB samples (0-255) into the space used for clustering."""
    if color_space == "rgb":
        return np.asarray(rgb, dtype=np.float64)
    if color_space == "lab":
        scaled = (np.asarray(rgb, dtype=np.float32) / 255.0).reshape(-1, 1, 3)
        return cv2.cvtColor(scaled, cv2.COLOR_RGB2Lab).reshape(-1, 3).astype(np.float64)
    raise ValueError(f"Unsupported colour space: {color_space!r}")


def from_color_space(points: np.ndarray, color_space: str = "rgb") -> np.ndarray:
    """Map points from the clustering space back to clipped uint8 RGB."""
    if color_space == "rgb":
        rgb = np.asarray(points, dtype=np.float64)
    elif color_space == "lab":
        lab = np.asarray(points, dtype=np.float32).reshape(-1, 1, 3)
        rgb = cv2.cvtColor(lab, cv2.COLOR_Lab2RGB).reshape(-1, 3).astype(np.float64) * 255.0
    else:
        raise ValueError(f"Unsupported colour space: {color_space!r}")
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def cluster_palette(samples, k: int = 5, rng_seed: Optional[int] = 42,
                    color_space: str = "rgb",
                    empty_cluster_policy=EmptyClusterPolicy.RESEED_NEAREST,
                    max_iterations: int = 300,
                    tolerance: Optional[float] = None,
                    max_restarts: int = 10,
                    n_init: int = 1,
                    workers: Optional[int] = None) -> Tuple[List[Dict[str, Any]], ClusteringResult]:
    """
    Cluster colour samples into a palette ordered by dominance.

    Args:
        samples: RGB samples (N, 3), channels in 0-255
        k: Number of palette colours
        rng_seed: Seed for deterministic clustering
        color_space: ``rgb`` or ``lab``
        empty_cluster_policy: Policy for clusters that lose all samples
        max_iterations: Iteration cap
        tolerance: Optional centroid-shift convergence threshold (clustering space units)
        max_restarts: Cap on re-initializations under the restart_run policy
        n_init: Independent runs; the lowest-inertia one is kept
        workers: Thread count for the assignment step

    Returns:
        Tuple of:
        - palette: ``{"hex", "rgb", "ratio", "count", "cluster_index"}`` entries, most dominant first
        - result: The raw clustering result (centroids in the clustering space)

    Raises:
        InvalidKError: If k exceeds the number of distinct colours
    """
    rgb = validate_samples(samples)
    n_unique = len(np.unique(rgb, axis=0))
    if isinstance(k, int) and not isinstance(k, bool) and n_unique < k:
        raise InvalidKError(f"Insufficient unique colors: {n_unique} < {k}")

    logger.info(f"Starting palette clustering with k={k}, {len(rgb)} samples, space={color_space}")

    points = to_color_space(rgb, color_space)
    result = run_clustering(
        points, k,
        empty_cluster_policy=empty_cluster_policy,
        max_iterations=max_iterations,
        random_seed=rng_seed,
        tolerance=tolerance,
        max_restarts=max_restarts,
        n_init=n_init,
        workers=workers,
    )

    centers = from_color_space(result.centroids, color_space)
    label_counts = Counter(result.assignment.tolist())
    total = len(result.assignment)

    # Sort clusters by dominance (descending); stable on cluster index
    order = sorted(range(result.k), key=lambda i: -label_counts.get(i, 0))
    palette = []
    for i in order:
        count = label_counts.get(i, 0)
        palette.append({
            "hex": rgb_to_hex(centers[i]),
            "rgb": [int(c) for c in centers[i]],
            "ratio": count / total,
            "count": count,
            "cluster_index": i,
        })

    ratios_str = [f"{p['ratio']:.3f}" for p in palette]
    logger.info(f"Palette ready: {ratios_str} (converged={result.converged})")
    return palette, result


def recolor_samples(samples, result: ClusteringResult, color_space: str = "rgb") -> np.ndarray:
    """Replace every sample by its cluster's centroid colour (uint8 RGB)."""
    rgb = validate_samples(samples)
    if len(rgb) != len(result.assignment):
        raise DimensionMismatchError(
            f"Result covers {len(result.assignment)} samples, got {len(rgb)}"
        )
    centers = from_color_space(result.centroids, color_space)
    return centers[result.assignment]
