"""
Convergence detection for the Lloyd iteration.
"""

from typing import Optional

import numpy as np


class ConvergenceDetector:
    """
    Decide whether another iteration would change anything.

    The run has converged when the assignment derived from the updated
    centroids equals the assignment that produced them, or when an update
    reproduces the previous centroids exactly. With ``tolerance``
    set, it has also converged once no centroid moves by ``tolerance`` or
    more (Euclidean), which stops oscillation between equal-cost assignments.

    Args:
        tolerance: Centroid shift threshold; None disables the shift rule
    """

    def __init__(self, tolerance: Optional[float] = None):
        if tolerance is not None and tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance

    @staticmethod
    def assignment_stable(previous: Optional[np.ndarray], current: np.ndarray) -> bool:
        if previous is None or previous.shape != current.shape:
            return False
        return bool(np.array_equal(previous, current))

    @staticmethod
    def centroids_unchanged(previous: Optional[np.ndarray], current: np.ndarray) -> bool:
        """True when an update reproduced the previous centroids exactly."""
        if previous is None or previous.shape != current.shape:
            return False
        return bool(np.array_equal(previous, current))

    @staticmethod
    def max_shift(previous: Optional[np.ndarray], current: np.ndarray) -> float:
        """Largest centroid displacement; infinite when the centroid sets are not comparable."""
        if previous is None or previous.shape != current.shape:
            return float("inf")
        return float(np.max(np.linalg.norm(current - previous, axis=1)))

    def has_converged(self, previous_assignment: Optional[np.ndarray], assignment: np.ndarray,
                      previous_centroids: Optional[np.ndarray] = None,
                      centroids: Optional[np.ndarray] = None) -> bool:
        if self.assignment_stable(previous_assignment, assignment):
            return True
        if centroids is not None and self.centroids_unchanged(previous_centroids, centroids):
            return True
        if self.tolerance is None or centroids is None:
            return False
        return self.max_shift(previous_centroids, centroids) < self.tolerance
