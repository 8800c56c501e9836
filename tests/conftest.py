"""
Pytest configuration and shared fixtures.

Syntetyczne chmury punktow budowane w numpy - bez plikow na dysku.
"""
import numpy as np
import pytest

from masc.core import PointCloud


@pytest.fixture
def intensity_cloud():
    """10 punktow, klasy rozdzielone idealnie przez pole Intensity"""
    coords = np.column_stack([np.arange(10), np.zeros(10), np.zeros(10)]).astype(np.float64)
    return PointCloud(
        coords,
        scalar_fields={
            "Classification": [0, 0, 0, 1, 1, 1, 1, 0, 0, 1],
            "Intensity": [1, 1, 1, 9, 9, 9, 9, 1, 1, 9],
        },
        name="intensity_cloud"
    )


@pytest.fixture
def random_cloud():
    """500 punktow z kolorami; klasa zalezy od wysokosci (Z > 50)"""
    rng = np.random.default_rng(0)
    n_points = 500
    coords = rng.uniform(0, 100, size=(n_points, 3))
    colors = rng.integers(0, 256, size=(n_points, 3), dtype=np.uint8)
    classification = np.where(coords[:, 2] > 50, 5, 2).astype(np.float32)
    intensity = rng.uniform(0, 1000, size=n_points).astype(np.float32)

    return PointCloud(
        coords,
        colors=colors,
        scalar_fields={
            "Classification": classification,
            "Intensity": intensity,
        },
        name="random_cloud"
    )
