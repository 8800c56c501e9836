"""
Moduły podstawowe (core) do obsługi chmur punktów

- PointCloud: Chmura punktów z polami skalarnymi
- PointSubset: Podzbiór punktów (globalne indeksy)
- LASLoader: Wczytywanie plików LAS/LAZ
- LASWriter: Zapis z klasyfikacją
"""

from .point_cloud import PointCloud
from .subset import PointSubset
from .las_loader import LASLoader, LAS_FIELD_NAMES
from .las_writer import LASWriter

__all__ = [
    'PointCloud',
    'PointSubset',
    'LASLoader',
    'LAS_FIELD_NAMES',
    'LASWriter'
]
