"""
Unit tests for dataset coercion, ranges and distance metrics.
"""

import math

import numpy as np
import pytest

from palettekit.services.clustering import (
    DimensionMismatchError, EmptyDatasetError, as_dataset, compute_ranges,
    euclidean, get_metric, manhattan, pairwise_distances, squared_euclidean,
)


class TestAsDataset:
    """Test dataset coercion and validation"""

    def test_returns_read_only_float_array(self):
        data = as_dataset([[1, 2], [3, 4], [5, 6]])
        assert data.shape == (3, 2)
        assert data.dtype == np.float64
        assert not data.flags.writeable
        with pytest.raises(ValueError):
            data[0, 0] = 99.0

    def test_copies_input_array(self):
        source = np.array([[1.0, 2.0], [3.0, 4.0]])
        data = as_dataset(source)
        source[0, 0] = 42.0
        assert data[0, 0] == 1.0

    def test_empty_dataset(self):
        with pytest.raises(EmptyDatasetError):
            as_dataset([])
        with pytest.raises(EmptyDatasetError):
            as_dataset(np.empty((0, 3)))

    def test_ragged_points(self):
        with pytest.raises(DimensionMismatchError):
            as_dataset([[1, 2, 3], [4, 5]])

    def test_zero_dimensional_points(self):
        with pytest.raises(DimensionMismatchError):
            as_dataset([[], []])

    def test_non_finite_values(self):
        with pytest.raises(ValueError):
            as_dataset([[1.0, float("nan")]])
        with pytest.raises(ValueError):
            as_dataset([[float("inf"), 1.0]])

    def test_errors_are_value_errors(self):
        """Input errors can be caught as plain ValueError"""
        with pytest.raises(ValueError):
            as_dataset([])


class TestComputeRanges:
    """Test per-dimension range calculation"""

    def test_ranges_per_dimension(self):
        ranges = compute_ranges(np.array([[0.0, 5.0, -1.0], [2.0, 3.0, -1.0], [1.0, 9.0, -1.0]]))
        assert [(r.min, r.max) for r in ranges] == [(0.0, 2.0), (3.0, 9.0), (-1.0, -1.0)]

    def test_single_point(self):
        ranges = compute_ranges([[4.0, 7.0]])
        assert ranges[0].min == ranges[0].max == 4.0
        assert ranges[1].min == ranges[1].max == 7.0

    def test_empty_dataset(self):
        with pytest.raises(EmptyDatasetError):
            compute_ranges(np.empty((0, 2)))
        with pytest.raises(EmptyDatasetError):
            compute_ranges([])

    def test_not_a_point_matrix(self):
        with pytest.raises(DimensionMismatchError):
            compute_ranges([1.0, 2.0, 3.0])


class TestDistanceMetrics:
    """Test built-in metrics"""

    def test_euclidean(self):
        assert euclidean([0, 0], [3, 4]) == 5.0
        assert euclidean([2], [-1]) == 3.0
        assert euclidean([1, 2, 3, 4], [1, 2, 3, 4]) == 0.0

    def test_euclidean_is_symmetric(self):
        a, b = [1.5, -2.0, 7.0], [0.0, 3.0, -1.0]
        assert euclidean(a, b) == euclidean(b, a)

    def test_squared_and_manhattan(self):
        assert squared_euclidean([0, 0], [3, 4]) == 25.0
        assert manhattan([0, 0], [3, -4]) == 7.0

    def test_dimension_mismatch(self):
        for metric in (euclidean, squared_euclidean, manhattan):
            with pytest.raises(DimensionMismatchError):
                metric([1, 2], [1, 2, 3])

    def test_get_metric(self):
        assert get_metric("euclidean") is euclidean
        with pytest.raises(ValueError):
            get_metric("cosine")


class TestPairwiseDistances:
    """Test point-to-centroid distance matrices"""

    def test_vectorized_matches_scalar(self):
        rng = np.random.default_rng(0)
        points = rng.normal(size=(12, 3))
        centroids = rng.normal(size=(4, 3))
        for metric in (euclidean, squared_euclidean, manhattan):
            expected = np.array([[metric(p, c) for c in centroids] for p in points])
            np.testing.assert_allclose(pairwise_distances(points, centroids, metric), expected)

    def test_custom_metric(self):
        def chebyshev(a, b):
            return max(abs(x - y) for x, y in zip(a, b))

        points = np.array([[0.0, 0.0], [3.0, 1.0]])
        centroids = np.array([[1.0, 5.0]])
        distances = pairwise_distances(points, centroids, chebyshev)
        assert distances.shape == (2, 1)
        assert math.isclose(distances[0, 0], 5.0)
        assert math.isclose(distances[1, 0], 4.0)

    def test_width_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            pairwise_distances(np.zeros((3, 2)), np.zeros((2, 3)))
