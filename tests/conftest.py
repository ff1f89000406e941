"""
Test configuration and fixtures for palettekit tests.
"""
import numpy as np
import pytest
from fastapi.testclient import TestClient

from palettekit.main import app
from palettekit.utils.metrics import reset_metrics


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def clean_metrics():
    """Reset metrics before each test."""
    reset_metrics()
    yield


@pytest.fixture
def four_points():
    """Two well-separated pairs: {[0,0],[0,1]} and {[10,0],[10,1]}."""
    return [[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]]


@pytest.fixture
def blobs():
    """Three tight Gaussian blobs in 4-D, 50 points each."""
    rng = np.random.default_rng(7)
    centers = np.array([
        [0.0, 0.0, 0.0, 0.0],
        [8.0, 8.0, 0.0, 0.0],
        [0.0, 8.0, 8.0, 8.0],
    ])
    return np.vstack([rng.normal(loc=c, scale=0.4, size=(50, 4)) for c in centers])


@pytest.fixture
def red_blue_samples():
    """60 pure red and 40 pure blue RGB samples."""
    return [[255, 0, 0]] * 60 + [[0, 0, 255]] * 40
