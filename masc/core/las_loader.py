"""
Moduł do wczytywania chmur punktów LAS/LAZ

Używa laspy do odczytu plików LAS/LAZ i buduje PointCloud:
współrzędne, kolory RGB (8 bit) oraz pola skalarne (intensywność,
klasyfikacja, numery odbić, wymiary dodatkowe).
"""

import laspy
import numpy as np
from pathlib import Path
from typing import Dict, Optional
import logging

from .point_cloud import PointCloud

logger = logging.getLogger(__name__)


# Nazwy pól skalarnych dla standardowych wymiarów LAS
LAS_FIELD_NAMES = {
    'intensity': 'Intensity',
    'return_number': 'Return Number',
    'number_of_returns': 'Number Of Returns',
    'classification': 'Classification',
    'scan_angle_rank': 'Scan Angle Rank',
    'scan_angle': 'Scan Angle',
    'user_data': 'User Data',
    'point_source_id': 'Point Source ID',
    'gps_time': 'Gps Time',
}


class LASLoader:
    """Wczytywanie chmur punktów LAS/LAZ jako PointCloud"""

    def __init__(self, file_path: str):
        """
        Args:
            file_path: Ścieżka do pliku LAS/LAZ
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Plik nie istnieje: {file_path}")

        logger.info(f"Inicjalizacja loadera dla: {self.file_path.name}")

    def load(self, sample_size: Optional[int] = None) -> PointCloud:
        """
        Wczytuje chmurę punktów z opcjonalnym próbkowaniem

        Args:
            sample_size: Jeśli podane, losowo wybiera N punktów (dla szybszych testów)

        Returns:
            PointCloud z polami skalarnymi dla dostępnych wymiarów
        """
        logger.info(f"Wczytywanie: {self.file_path.name}")

        with laspy.open(self.file_path) as f:
            las = f.read()

        coords = np.vstack([las.x, las.y, las.z]).T
        n_points = len(coords)
        logger.info(f"Wczytano {n_points:,} punktów")

        sample_idx = None
        if sample_size and sample_size < n_points:
            sample_idx = np.sort(np.random.choice(n_points, sample_size, replace=False))
            coords = coords[sample_idx]
            logger.info(f"Próbkowanie do {sample_size:,} punktów")

        dimension_names = list(las.point_format.dimension_names)

        # Kolory RGB: uint16 [0-65535] -> [0-255]
        colors = None
        if all(c in dimension_names for c in ('red', 'green', 'blue')):
            colors = np.vstack([las.red, las.green, las.blue]).T
            if colors.size and colors.max() > 255:
                colors = colors // 257
            colors = colors.astype(np.uint8)
            if sample_idx is not None:
                colors = colors[sample_idx]
            logger.info("Znaleziono kolory RGB")

        cloud = PointCloud(coords, colors=colors, name=self.file_path.stem)

        for dim in dimension_names:
            if dim not in LAS_FIELD_NAMES:
                continue
            cloud.add_scalar_field(LAS_FIELD_NAMES[dim], self._dimension(las, dim, sample_idx))

        for dim in las.point_format.extra_dimension_names:
            cloud.add_scalar_field(dim, self._dimension(las, dim, sample_idx))

        logger.info(f"Pola skalarne: {', '.join(cloud.scalar_field_names)}")
        return cloud

    @staticmethod
    def _dimension(las: laspy.LasData, dim: str, sample_idx: Optional[np.ndarray]) -> np.ndarray:
        values = np.array(las[dim]).astype(np.float32)
        if sample_idx is not None:
            values = values[sample_idx]
        return values

    @staticmethod
    def get_file_info(file_path: str) -> Dict:
        """
        Metadane pliku z samego nagłówka (bez wczytywania punktów)

        Zwraca też listę pól skalarnych, które utworzy load() - do
        sprawdzenia dostępności cech przed treningiem.
        """
        with laspy.open(file_path) as f:
            header = f.header

        point_format = header.point_format
        dimension_names = list(point_format.dimension_names)
        extra_dimensions = list(point_format.extra_dimension_names)

        scalar_fields = [LAS_FIELD_NAMES[d] for d in dimension_names if d in LAS_FIELD_NAMES]
        scalar_fields += extra_dimensions

        return {
            'n_points': header.point_count,
            'bounds': {
                'x': (header.x_min, header.x_max),
                'y': (header.y_min, header.y_max),
                'z': (header.z_min, header.z_max)
            },
            'version': f"{header.version.major}.{header.version.minor}",
            'point_format': point_format.id,
            'has_rgb': all(c in dimension_names for c in ('red', 'green', 'blue')),
            'scalar_fields': scalar_fields,
            'extra_dimensions': extra_dimensions
        }
