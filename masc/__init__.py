"""
MASC - klasyfikacja chmur punktow lasem losowym na cechach punktowych

Moduly:
- core: Chmura punktow, podzbiory, wczytywanie/zapis LAS/LAZ
- features: Deskryptory cech, zrodla wartosci, macierz probek
- ml: Klasyfikator Random Trees (trening, ewaluacja, zapis/odczyt)

Przyklad uzycia:
    from masc import LASLoader, PointSubset, Classifier, RandomTreesParams, parse_features

    cloud = LASLoader("labeled.las").load()
    features = parse_features(["Intensity", "Z", "R", "G", "B"], cloud)
    train, test = PointSubset.full(cloud).split(test_ratio=0.2)

    clf = Classifier()
    ok, msg = clf.train(RandomTreesParams(), features, train)
    ok, metrics, msg = clf.evaluate(features, test)
"""

from .core import PointCloud, PointSubset, LASLoader, LASWriter
from .features import (
    Feature,
    FeatureSource,
    parse_features,
    missing_features,
    build_sample_matrix,
    build_labels
)
from .ml import Classifier, AccuracyMetrics, RandomTreesParams, ProgressSink

__version__ = "1.0.0"
__all__ = [
    'PointCloud',
    'PointSubset',
    'LASLoader',
    'LASWriter',
    'Feature',
    'FeatureSource',
    'parse_features',
    'missing_features',
    'build_sample_matrix',
    'build_labels',
    'Classifier',
    'AccuracyMetrics',
    'RandomTreesParams',
    'ProgressSink'
]
