"""
Cechy punktowe i macierz probek

- Feature, FeatureSource: deskryptory cech
- ValueSource, resolve: dostep do wartosci cechy po indeksie punktu
- build_sample_matrix, build_labels: macierz (N, F) i etykiety dla klasyfikatora
"""

from .feature import Feature, FeatureSource, parse_features
from .value_sources import ValueSource, resolve, missing_features
from .sample_matrix import (
    build_sample_matrix,
    build_labels,
    get_classification_field,
    sample_indices
)

__all__ = [
    'Feature',
    'FeatureSource',
    'parse_features',
    'ValueSource',
    'resolve',
    'missing_features',
    'build_sample_matrix',
    'build_labels',
    'get_classification_field',
    'sample_indices'
]
