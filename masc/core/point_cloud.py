"""
Model chmury punktów w pamięci

Chmura przechowuje współrzędne XYZ, opcjonalne kolory RGB (0-255)
oraz dowolną liczbę nazwanych pól skalarnych (jedna wartość na punkt).
Właścicielem chmury jest aplikacja-host; klasyfikator tylko ją czyta.
"""

import numpy as np
from typing import Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


class PointCloud:
    """
    Chmura punktów z polami skalarnymi

    Usage:
        cloud = PointCloud(coords, colors=rgb, name="scan_01")
        cloud.add_scalar_field("Intensity", intensity)
        idx = cloud.get_scalar_field_index_by_name("Intensity")
    """

    def __init__(self,
                 coords: np.ndarray,
                 colors: Optional[np.ndarray] = None,
                 scalar_fields: Optional[Dict[str, Iterable[float]]] = None,
                 name: str = "cloud"):
        """
        Args:
            coords: (N, 3) Współrzędne XYZ
            colors: (N, 3) RGB [0-255] (opcjonalne)
            scalar_fields: {nazwa: wartości} (opcjonalne)
            name: Nazwa chmury (do logów i komunikatów)
        """
        coords = np.asarray(coords, dtype=np.float64)
        if coords.ndim != 2 or coords.shape[1] != 3:
            raise ValueError(f"Expected (N, 3) coordinates, got {coords.shape}")

        if colors is not None:
            colors = np.asarray(colors)
            if colors.shape != coords.shape:
                raise ValueError(f"Colors shape {colors.shape} does not match coordinates {coords.shape}")

        self.coords = coords
        self.colors = colors
        self.name = name

        # Kolejność dodawania = indeks pola
        self._sf_names: List[str] = []
        self._sf_values: List[np.ndarray] = []

        for sf_name, values in (scalar_fields or {}).items():
            self.add_scalar_field(sf_name, values)

    def size(self) -> int:
        """Liczba punktów"""
        return len(self.coords)

    def __len__(self) -> int:
        return self.size()

    def has_colors(self) -> bool:
        return self.colors is not None

    @property
    def scalar_field_names(self) -> List[str]:
        return list(self._sf_names)

    def add_scalar_field(self, name: str, values: Iterable[float]) -> int:
        """
        Dodaje (lub zastępuje) pole skalarne

        Pole krótsze niż liczba punktów jest przyjmowane, ale uznawane
        za niepoprawne i nie będzie czytane przez klasyfikator.

        Returns:
            Indeks pola
        """
        values = np.asarray(values).ravel()
        if len(values) < self.size():
            logger.warning(f"Scalar field '{name}' has {len(values):,} values "
                           f"for {self.size():,} points (invalid)")

        index = self.get_scalar_field_index_by_name(name)
        if index is not None:
            self._sf_values[index] = values
            return index

        self._sf_names.append(name)
        self._sf_values.append(values)
        return len(self._sf_names) - 1

    def get_scalar_field_index_by_name(self, name: str) -> Optional[int]:
        """Indeks pola skalarnego lub None gdy pole nie istnieje"""
        try:
            return self._sf_names.index(name)
        except ValueError:
            return None

    def get_scalar_field(self, index: int) -> np.ndarray:
        return self._sf_values[index]

    def scalar_field(self, name: str) -> Optional[np.ndarray]:
        """Wartości pola skalarnego po nazwie (None gdy brak)"""
        index = self.get_scalar_field_index_by_name(name)
        if index is None:
            return None
        return self._sf_values[index]

    def __repr__(self):
        return (f"{self.__class__.__name__}(name='{self.name}', points={self.size()}, "
                f"colors={self.has_colors()}, scalar_fields={self._sf_names})")
