"""
Feature - deskryptor jednej kolumny macierzy probek

Cecha mowi skad brac wartosci (pole skalarne, wspolrzedna, kanal koloru)
i z ktorej chmury. Deskryptory sa niezmienne i nie sa wlascicielami chmury.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from ..core.point_cloud import PointCloud


class FeatureSource(Enum):
    """Zrodlo wartosci cechy"""
    SCALAR_FIELD = "SF"
    DIM_X = "X"
    DIM_Y = "Y"
    DIM_Z = "Z"
    RED = "R"
    GREEN = "G"
    BLUE = "B"


# Aliasy akceptowane przy parsowaniu (wielkosc liter bez znaczenia)
_SOURCE_ALIASES = {
    'X': FeatureSource.DIM_X,
    'Y': FeatureSource.DIM_Y,
    'Z': FeatureSource.DIM_Z,
    'R': FeatureSource.RED,
    'RED': FeatureSource.RED,
    'G': FeatureSource.GREEN,
    'GREEN': FeatureSource.GREEN,
    'B': FeatureSource.BLUE,
    'BLUE': FeatureSource.BLUE,
}

_SF_PREFIX = "SF:"


@dataclass(frozen=True, eq=False)
class Feature:
    """
    Deskryptor cechy punktowej

    Usage:
        f = Feature(cloud, FeatureSource.SCALAR_FIELD, "Intensity")
        z = Feature(cloud, FeatureSource.DIM_Z)
    """
    cloud: PointCloud
    source: FeatureSource
    source_name: str = ""  # wymagane dla pol skalarnych

    def __post_init__(self):
        if self.cloud is None:
            raise ValueError("Feature requires an associated cloud")
        if self.source == FeatureSource.SCALAR_FIELD and not self.source_name:
            raise ValueError("Scalar field feature requires a source name")

    def _key(self):
        return id(self.cloud), self.source, self.source_name

    def __eq__(self, other):
        if not isinstance(other, Feature):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    @property
    def name(self) -> str:
        """Nazwa cechy (token akceptowany przez parse())"""
        if self.source == FeatureSource.SCALAR_FIELD:
            return f"{_SF_PREFIX}{self.source_name}"
        return self.source.value

    def __str__(self):
        return f"{self.name}@{self.cloud.name}"

    @classmethod
    def parse(cls, token: str, cloud: PointCloud) -> 'Feature':
        """
        Tworzy ceche z tekstu

        Akceptuje: X, Y, Z, R/RED, G/GREEN, B/BLUE, SF:<nazwa pola>
        lub sama nazwe pola skalarnego.
        """
        token = token.strip()
        if not token:
            raise ValueError("Empty feature name")

        if token.upper().startswith(_SF_PREFIX):
            return cls(cloud, FeatureSource.SCALAR_FIELD, token[len(_SF_PREFIX):])

        source = _SOURCE_ALIASES.get(token.upper())
        if source is not None:
            return cls(cloud, source)

        return cls(cloud, FeatureSource.SCALAR_FIELD, token)


def parse_features(tokens: Iterable[str], cloud: PointCloud) -> List[Feature]:
    """Parsuje liste nazw cech dla jednej chmury"""
    return [Feature.parse(token, cloud) for token in tokens]
