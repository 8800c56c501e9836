"""
Tests for feature descriptors and value sources
"""

import numpy as np
import pytest
import logging

from masc.core import PointCloud
from masc.errors import SourceResolutionError
from masc.features import Feature, FeatureSource, ValueSource, missing_features, parse_features, resolve

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def test_scalar_field_source(random_cloud):
    """Pole skalarne: wartosc = wartosc pola jako float"""
    logger.info("Testing scalar field source...")

    source = resolve(Feature(random_cloud, FeatureSource.SCALAR_FIELD, "Intensity"), random_cloud)
    intensity = random_cloud.scalar_field("Intensity")

    assert source.is_valid()
    for i in (0, 17, 499):
        assert source.value_at(i) == float(intensity[i])

    logger.info("✅ Scalar field source test passed")


def test_first_scalar_field_is_found():
    """Pole o indeksie 0 nie moze byc traktowane jako brak pola"""
    cloud = PointCloud(np.zeros((3, 3)), scalar_fields={"First": [1, 2, 3]})

    assert cloud.get_scalar_field_index_by_name("First") == 0
    assert cloud.get_scalar_field_index_by_name("Missing") is None

    source = resolve(Feature(cloud, FeatureSource.SCALAR_FIELD, "First"), cloud)
    assert source.value_at(2) == 3.0


def test_short_scalar_field_is_invalid():
    """Pole krotsze niz chmura jest niepoprawne i nie moze byc czytane"""
    cloud = PointCloud(np.zeros((5, 3)), scalar_fields={"Short": [1, 2, 3]})
    source = resolve(Feature(cloud, FeatureSource.SCALAR_FIELD, "Short"), cloud)

    assert not source.is_valid()
    with pytest.raises(ValueError):
        source.value_at(0)
    with pytest.raises(ValueError):
        source.values_at(np.array([0, 1]))


def test_unknown_scalar_field_fails_to_resolve(random_cloud):
    with pytest.raises(SourceResolutionError, match="Nope"):
        resolve(Feature(random_cloud, FeatureSource.SCALAR_FIELD, "Nope"), random_cloud)


def test_coordinate_and_color_sources(random_cloud):
    """Wspolrzedne zawsze poprawne, kolory tylko gdy chmura je ma"""
    logger.info("Testing coordinate and color sources...")

    for source_kind, axis in ((FeatureSource.DIM_X, 0), (FeatureSource.DIM_Y, 1), (FeatureSource.DIM_Z, 2)):
        source = resolve(Feature(random_cloud, source_kind), random_cloud)
        assert source.is_valid()
        assert source.value_at(42) == float(random_cloud.coords[42, axis])

    for source_kind, channel in ((FeatureSource.RED, 0), (FeatureSource.GREEN, 1), (FeatureSource.BLUE, 2)):
        source = resolve(Feature(random_cloud, source_kind), random_cloud)
        assert source.is_valid()
        assert source.value_at(7) == float(random_cloud.colors[7, channel])

    no_colors = PointCloud(np.zeros((4, 3)))
    assert not ValueSource(FeatureSource.RED, no_colors).is_valid()
    assert ValueSource(FeatureSource.DIM_Z, no_colors).is_valid()

    logger.info("✅ Coordinate and color sources test passed")


def test_values_at_matches_value_at(random_cloud):
    """Odczyt wektorowy = odczyt punkt po punkcie"""
    indices = np.array([3, 3, 250, 0, 499, 12])

    for feature in parse_features(["Intensity", "X", "Z", "G"], random_cloud):
        source = resolve(feature, random_cloud)
        expected = [source.value_at(i) for i in indices]
        assert np.array_equal(source.values_at(indices).astype(np.float64), expected), f"Mismatch for {feature}"


def test_feature_parse():
    cloud = PointCloud(np.zeros((2, 3)), name="c")

    assert Feature.parse("x", cloud).source == FeatureSource.DIM_X
    assert Feature.parse("Red", cloud).source == FeatureSource.RED
    assert Feature.parse("B", cloud).source == FeatureSource.BLUE

    sf = Feature.parse("SF:R", cloud)
    assert sf.source == FeatureSource.SCALAR_FIELD
    assert sf.source_name == "R"

    bare = Feature.parse("Intensity", cloud)
    assert bare.source == FeatureSource.SCALAR_FIELD
    assert bare.name == "SF:Intensity"
    assert str(bare) == "SF:Intensity@c"

    # Wartosc (chmura, zrodlo, nazwa) - nie tozsamosc obiektu
    assert Feature.parse("Intensity", cloud) == bare
    assert Feature.parse("Intensity", PointCloud(np.zeros((2, 3)))) != bare

    with pytest.raises(ValueError):
        Feature(cloud, FeatureSource.SCALAR_FIELD)
    with pytest.raises(ValueError):
        Feature.parse("  ", cloud)


def test_missing_features(random_cloud):
    no_colors = PointCloud(np.zeros((3, 3)), scalar_fields={"Intensity": [1, 2, 3]})

    features = parse_features(["Intensity", "Z", "R", "Ghost"], no_colors)
    missing = missing_features(features)

    assert [f.name for f in missing] == ["R", "SF:Ghost"]
    assert missing_features(parse_features(["Intensity", "R"], random_cloud)) == []
