"""
Unit tests for the assignment and update steps.
"""

import numpy as np
import pytest

from palettekit.services.clustering import (
    DimensionMismatchError, as_dataset, assign_points, clusters_from_assignment,
    compute_inertia, euclidean, update_centroids,
)


class TestAssignPoints:
    """Test nearest-centroid assignment"""

    def test_nearest_centroid(self, four_points):
        data = as_dataset(four_points)
        centroids = np.array([[10.0, 0.5], [0.0, 0.5]])
        assignment = assign_points(data, centroids)
        assert assignment.tolist() == [1, 1, 0, 0]
        assert assignment.dtype == np.int64

    def test_ties_go_to_lowest_index(self):
        data = as_dataset([[0.0, 0.0], [5.0, 5.0]])
        centroids = np.array([[1.0, 0.0], [-1.0, 0.0], [0.0, 1.0]])
        assert assign_points(data, centroids)[0] == 0

        duplicates = np.array([[5.0, 5.0], [5.0, 5.0]])
        assert assign_points(data, duplicates).tolist() == [0, 0]

    def test_partition_property(self, blobs):
        data = as_dataset(blobs)
        centroids = np.random.default_rng(3).uniform(-1, 9, size=(6, 4))
        assignment = assign_points(data, centroids)
        assert assignment.shape == (len(data),)
        assert assignment.min() >= 0 and assignment.max() < 6

        clusters = clusters_from_assignment(assignment, 6)
        covered = np.concatenate(clusters)
        assert sorted(covered.tolist()) == list(range(len(data)))

    def test_parallel_matches_serial(self, blobs):
        data = as_dataset(blobs)
        centroids = np.random.default_rng(11).uniform(0, 8, size=(4, 4))
        serial = assign_points(data, centroids)
        for workers in (2, 3, 8):
            np.testing.assert_array_equal(assign_points(data, centroids, workers=workers), serial)

    def test_custom_metric_is_used(self, four_points):
        calls = []

        def counting_euclidean(a, b):
            calls.append(1)
            return euclidean(a, b)

        data = as_dataset(four_points)
        centroids = np.array([[0.0, 0.5], [10.0, 0.5]])
        assignment = assign_points(data, centroids, counting_euclidean)
        assert assignment.tolist() == [0, 0, 1, 1]
        assert len(calls) == len(data) * len(centroids)

    def test_does_not_mutate_centroids(self, blobs):
        data = as_dataset(blobs)
        centroids = np.random.default_rng(2).uniform(0, 8, size=(3, 4))
        before = centroids.copy()
        assign_points(data, centroids, workers=2)
        np.testing.assert_array_equal(centroids, before)

    def test_width_mismatch(self, four_points):
        with pytest.raises(DimensionMismatchError):
            assign_points(as_dataset(four_points), np.zeros((2, 3)))


class TestUpdateCentroids:
    """Test mean computation per cluster"""

    def test_means(self, four_points):
        data = as_dataset(four_points)
        means, counts = update_centroids(data, np.array([0, 0, 1, 1]), 2)
        np.testing.assert_allclose(means, [[0.0, 0.5], [10.0, 0.5]])
        assert counts.tolist() == [2, 2]

    def test_empty_cluster_is_undefined(self, four_points):
        data = as_dataset(four_points)
        means, counts = update_centroids(data, np.array([0, 0, 0, 2]), 3)
        assert counts.tolist() == [3, 0, 1]
        assert np.all(np.isnan(means[1]))
        np.testing.assert_allclose(means[0], [10.0 / 3, 1.0 / 3])
        np.testing.assert_allclose(means[2], [10.0, 1.0])

    def test_inertia(self, four_points):
        data = as_dataset(four_points)
        centroids = np.array([[0.0, 0.5], [10.0, 0.5]])
        assert compute_inertia(data, centroids, np.array([0, 0, 1, 1])) == pytest.approx(1.0)
