"""
Value Sources - dostep do wartosci cechy po indeksie punktu

Jeden typ ValueSource z polem `kind` (pole skalarne, wspolrzedna X/Y/Z,
kanal R/G/B) i jedna funkcja resolve() zamieniajaca deskryptor cechy
na zrodlo wartosci.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional
import logging

from .feature import Feature, FeatureSource
from ..core.point_cloud import PointCloud
from ..errors import SourceResolutionError

logger = logging.getLogger(__name__)


_COORD_AXIS = {
    FeatureSource.DIM_X: 0,
    FeatureSource.DIM_Y: 1,
    FeatureSource.DIM_Z: 2,
}

_COLOR_CHANNEL = {
    FeatureSource.RED: 0,
    FeatureSource.GREEN: 1,
    FeatureSource.BLUE: 2,
}


@dataclass(frozen=True, eq=False)
class ValueSource:
    """Zrodlo wartosci numerycznych dla punktow jednej chmury"""
    kind: FeatureSource
    cloud: PointCloud
    field: Optional[np.ndarray] = None  # tylko dla SCALAR_FIELD

    def is_valid(self) -> bool:
        if self.cloud is None:
            return False
        if self.kind == FeatureSource.SCALAR_FIELD:
            return self.field is not None and len(self.field) >= self.cloud.size()
        if self.kind in _COLOR_CHANNEL:
            return self.cloud.has_colors()
        return True

    def _check(self):
        if not self.is_valid():
            raise ValueError(f"Invalid value source ({self.kind.name})")

    def value_at(self, point_index: int) -> float:
        """Wartosc dla jednego punktu"""
        self._check()
        if self.kind == FeatureSource.SCALAR_FIELD:
            return float(self.field[point_index])
        if self.kind in _COORD_AXIS:
            return float(self.cloud.coords[point_index, _COORD_AXIS[self.kind]])
        return float(self.cloud.colors[point_index, _COLOR_CHANNEL[self.kind]])

    def values_at(self, indices: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Wartosci dla wielu punktow naraz

        Args:
            indices: globalne indeksy punktow (None = wszystkie punkty chmury)

        Returns:
            (len(indices),) wartosci, te same co value_at() dla kazdego indeksu
        """
        self._check()
        n_points = self.cloud.size()
        rows = slice(0, n_points) if indices is None else indices

        if self.kind == FeatureSource.SCALAR_FIELD:
            return self.field[rows]
        if self.kind in _COORD_AXIS:
            return self.cloud.coords[rows, _COORD_AXIS[self.kind]]
        return self.cloud.colors[rows, _COLOR_CHANNEL[self.kind]]


def resolve(feature: Feature, cloud: PointCloud) -> ValueSource:
    """
    Zamienia deskryptor cechy na zrodlo wartosci

    Raises:
        SourceResolutionError: brak deskryptora lub nieznane pole skalarne
    """
    if feature is None:
        raise SourceResolutionError("Internal error: invalid feature (None)")

    if feature.source == FeatureSource.SCALAR_FIELD:
        sf_index = cloud.get_scalar_field_index_by_name(feature.source_name)
        if sf_index is None:
            logger.warning(f"Internal error: unknown scalar field '{feature.source_name}'")
            raise SourceResolutionError(f"Internal error: unknown scalar field '{feature.source_name}'")
        return ValueSource(feature.source, cloud, cloud.get_scalar_field(sf_index))

    return ValueSource(feature.source, cloud)


def missing_features(features) -> list:
    """
    Zwraca cechy, ktorych nie da sie odczytac z ich chmury

    Do walidacji po stronie wywolujacego, przed train()/evaluate().
    """
    missing = []
    for f in features:
        if f is None:
            missing.append(f)
            continue
        try:
            source = resolve(f, f.cloud)
        except SourceResolutionError:
            missing.append(f)
            continue
        if not source.is_valid():
            missing.append(f)
    return missing
