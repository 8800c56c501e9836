"""
Sample Matrix Builder - budowa macierzy probek (N, F) i wektora etykiet

Wiersze = wybrane punkty (podzbior lub cala chmura), kolumny = cechy.
Kazde zrodlo wartosci jest tworzone raz na kolumne, potem kolumna jest
wypelniana dla wszystkich wierszy naraz.
"""

import numpy as np
from typing import Optional, Sequence
import logging

from .feature import Feature
from .value_sources import resolve
from ..core.point_cloud import PointCloud
from ..core.subset import PointSubset
from ..config import CLASSIFIER
from ..errors import PreconditionError, SampleMatrixError, SourceResolutionError

logger = logging.getLogger(__name__)


def sample_indices(cloud: PointCloud, subset: Optional[PointSubset] = None) -> np.ndarray:
    """Globalne indeksy punktow w kolejnosci wierszy"""
    if subset is None:
        return np.arange(cloud.size())
    if subset.cloud is not cloud:
        raise PreconditionError("Invalid subset (associated point cloud is different)")
    return subset.indices


def get_classification_field(
    cloud: PointCloud,
    field_name: str = CLASSIFIER.CLASSIFICATION_FIELD
) -> np.ndarray:
    """
    Zwraca pole klasyfikacji (ground truth)

    Raises:
        PreconditionError: brak pola lub pole krotsze niz chmura
    """
    sf_index = cloud.get_scalar_field_index_by_name(field_name)
    if sf_index is None:
        raise PreconditionError(f"Missing '{field_name}' field on input cloud")

    field = cloud.get_scalar_field(sf_index)
    if len(field) < cloud.size():
        raise PreconditionError(f"Invalid '{field_name}' field on input cloud")

    return field


def build_labels(
    cloud: PointCloud,
    subset: Optional[PointSubset] = None,
    field_name: str = CLASSIFIER.CLASSIFICATION_FIELD
) -> np.ndarray:
    """
    Buduje wektor etykiet (obciete do int wartosci pola klasyfikacji)

    Args:
        cloud: chmura z polem klasyfikacji
        subset: podzbior punktow (None = cala chmura)
        field_name: nazwa pola z etykietami

    Returns:
        (N,) int32 etykiety w tej samej kolejnosci co wiersze macierzy
    """
    field = get_classification_field(cloud, field_name)
    indices = sample_indices(cloud, subset)
    return np.trunc(np.asarray(field[indices], dtype=np.float64)).astype(np.int32)


def build_sample_matrix(
    features: Sequence[Feature],
    cloud: PointCloud,
    subset: Optional[PointSubset] = None
) -> np.ndarray:
    """
    Buduje macierz probek (N, F) float32

    Args:
        features: uporzadkowana lista cech (wszystkie z tej samej chmury)
        cloud: chmura zrodlowa
        subset: podzbior punktow (None = cala chmura)

    Returns:
        (N, F) macierz cech; komorka (i, j) = wartosc cechy j dla punktu i

    Raises:
        PreconditionError: brak cech, cecha lub podzbior z innej chmury
        SourceResolutionError: cecha bez poprawnego zrodla wartosci
        SampleMatrixError: blad alokacji macierzy
    """
    if not features:
        raise PreconditionError("No feature provided")

    indices = sample_indices(cloud, subset)

    # Walidacja przed alokacja
    sources = []
    for f in features:
        if f is None:
            raise SourceResolutionError("Internal error: invalid feature (None)")
        if f.cloud is not cloud:
            raise PreconditionError(f"Invalid feature ({f}): associated cloud is different than the others")

        source = resolve(f, cloud)
        if not source.is_valid():
            raise SourceResolutionError(f"Internal error: invalid source '{f.name}'")
        sources.append(source)

    n_samples = len(indices)
    n_features = len(sources)

    try:
        data = np.empty((n_samples, n_features), dtype=np.float32)
    except (MemoryError, ValueError) as e:
        raise SampleMatrixError(f"Can't allocate {n_samples:,} x {n_features} sample matrix: {e}") from e

    # Kolumna po kolumnie
    for column, source in enumerate(sources):
        data[:, column] = source.values_at(indices)

    return data
