"""
Tests for sample matrix and label vector assembly
"""

import numpy as np
import pytest
import logging

from masc.core import PointCloud, PointSubset
from masc.errors import PreconditionError, SourceResolutionError
from masc.features import build_labels, build_sample_matrix, parse_features, resolve

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def test_matrix_shape_and_cells(random_cloud):
    """Macierz |S| x |F|, komorka (i, j) = value_at(S[i]) cechy j"""
    logger.info("Testing sample matrix assembly...")

    features = parse_features(["Intensity", "X", "Y", "Z", "R", "G", "B"], random_cloud)
    subset = PointSubset(random_cloud, [10, 3, 3, 499, 0])

    data = build_sample_matrix(features, random_cloud, subset)

    assert data.shape == (5, 7), f"Expected (5, 7), got {data.shape}"
    assert data.dtype == np.float32

    for j, feature in enumerate(features):
        source = resolve(feature, random_cloud)
        for i in range(subset.size()):
            expected = np.float32(source.value_at(subset.get_point_global_index(i)))
            assert data[i, j] == expected, f"Cell ({i}, {j}) mismatch"

    logger.info("✅ Sample matrix test passed")


def test_matrix_without_subset_uses_all_points(intensity_cloud):
    features = parse_features(["Intensity", "X"], intensity_cloud)
    data = build_sample_matrix(features, intensity_cloud)

    assert data.shape == (10, 2)
    assert np.array_equal(data[:, 0], [1, 1, 1, 9, 9, 9, 9, 1, 1, 9])
    assert np.array_equal(data[:, 1], np.arange(10))


def test_empty_subset_gives_empty_matrix(intensity_cloud):
    features = parse_features(["Intensity"], intensity_cloud)
    data = build_sample_matrix(features, intensity_cloud, PointSubset(intensity_cloud, []))
    assert data.shape == (0, 1)


def test_matrix_preconditions(random_cloud, intensity_cloud):
    with pytest.raises(PreconditionError, match="No feature"):
        build_sample_matrix([], random_cloud)

    # Cecha z innej chmury
    mixed = parse_features(["Intensity"], random_cloud) + parse_features(["Intensity"], intensity_cloud)
    with pytest.raises(PreconditionError, match="associated cloud is different"):
        build_sample_matrix(mixed, random_cloud)

    # Podzbior z innej chmury
    with pytest.raises(PreconditionError, match="subset"):
        build_sample_matrix(parse_features(["Z"], random_cloud), random_cloud,
                            PointSubset(intensity_cloud, [0, 1]))

    with pytest.raises(SourceResolutionError):
        build_sample_matrix(parse_features(["Ghost"], random_cloud), random_cloud)

    no_colors = PointCloud(np.zeros((3, 3)))
    with pytest.raises(SourceResolutionError, match="invalid source"):
        build_sample_matrix(parse_features(["R"], no_colors), no_colors)


def test_subset_rejects_out_of_range_indices(intensity_cloud):
    with pytest.raises(ValueError):
        PointSubset(intensity_cloud, [0, 10])
    with pytest.raises(ValueError):
        PointSubset(intensity_cloud, [-1])


def test_labels_are_truncated():
    cloud = PointCloud(np.zeros((4, 3)), scalar_fields={"Classification": [1.7, 2.2, -0.5, 6.0]})

    assert np.array_equal(build_labels(cloud), [1, 2, 0, 6])
    assert np.array_equal(build_labels(cloud, PointSubset(cloud, [3, 0])), [6, 1])


def test_labels_require_classification_field():
    missing = PointCloud(np.zeros((3, 3)), scalar_fields={"Intensity": [1, 2, 3]})
    with pytest.raises(PreconditionError, match="Missing 'Classification'"):
        build_labels(missing)

    short = PointCloud(np.zeros((3, 3)), scalar_fields={"Classification": [1, 2]})
    with pytest.raises(PreconditionError, match="Invalid 'Classification'"):
        build_labels(short)


def test_subset_split(random_cloud):
    train, test = PointSubset.full(random_cloud).split(test_ratio=0.2, random_state=1)

    assert train.size() == 400
    assert test.size() == 100
    assert set(train.indices).isdisjoint(test.indices)
    assert train.cloud is random_cloud

    train_s, test_s = PointSubset.full(random_cloud).split(test_ratio=0.2, stratify=True)
    labels = build_labels(random_cloud, test_s)
    assert set(np.unique(labels)) == {2, 5}


def test_subset_from_mask(intensity_cloud):
    mask = intensity_cloud.scalar_field("Classification") == 1
    subset = PointSubset.from_mask(intensity_cloud, mask)

    assert list(subset.indices) == [3, 4, 5, 6, 9]
    assert np.all(build_labels(intensity_cloud, subset) == 1)

    with pytest.raises(ValueError):
        PointSubset.from_mask(intensity_cloud, mask[:5])


def test_stratified_split_uses_given_field():
    """Podzial warstwowy po wskazanym polu etykiet"""
    labels = np.array([0] * 40 + [7] * 10, dtype=np.float32)
    cloud = PointCloud(np.zeros((50, 3)), scalar_fields={"Label": labels})

    train, test = PointSubset.full(cloud).split(test_ratio=0.2, stratify=True, field_name="Label")

    assert test.size() == 10
    assert np.count_nonzero(labels[test.indices] == 7) == 2

    # Brak domyslnego pola Classification
    with pytest.raises(ValueError, match="Classification"):
        PointSubset.full(cloud).split(test_ratio=0.2, stratify=True)
