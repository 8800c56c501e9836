"""
Moduł do zapisu chmur punktów LAS/LAZ z klasyfikacją

Zapisuje PointCloud do pliku LAS/LAZ, ustawiając wynik klasyfikacji
w polu 'classification'. Intensywność i kolory są przenoszone, jeśli są.
"""

import laspy
import numpy as np
from pathlib import Path
from typing import Optional
import logging

from .point_cloud import PointCloud

logger = logging.getLogger(__name__)


class LASWriter:
    """Zapis chmur punktów z wynikami klasyfikacji"""

    @staticmethod
    def write(
        output_path: str,
        cloud: PointCloud,
        classification: np.ndarray,
        scales: Optional[np.ndarray] = None,
        offsets: Optional[np.ndarray] = None
    ) -> None:
        """
        Zapisuje chmurę punktów z klasyfikacją do pliku LAS/LAZ

        Args:
            output_path: Ścieżka wyjściowa (*.las lub *.laz)
            cloud: Chmura punktów
            classification: (N,) Klasy (0-255)
            scales: Skale współrzędnych (domyślnie 1mm)
            offsets: Offsety współrzędnych (domyślnie minimum chmury)
        """
        output_path = Path(output_path)
        n_points = cloud.size()
        classification = np.asarray(classification)

        if len(classification) != n_points:
            raise ValueError(f"Classification has {len(classification):,} values for {n_points:,} points")

        logger.info(f"Zapisywanie {n_points:,} punktów do: {output_path.name}")

        min_class = int(classification.min()) if n_points else 0
        max_class = int(classification.max()) if n_points else 0

        # Pole classification w LAS: 0-255
        if min_class < 0 or max_class > 255:
            logger.error(f"Klasy poza zakresem LAS (min: {min_class}, max: {max_class})")
            raise ValueError(f"Classification values must be in [0, 255], got [{min_class}, {max_class}]")

        # Klasy > 31 wymagają LAS 1.4
        if max_class > 31:
            logger.info(f"Klasy > 31 wykryte (max: {max_class}), używam LAS 1.4")
            point_format = 7 if cloud.has_colors() else 6
            version = "1.4"
        else:
            point_format = 3 if cloud.has_colors() else 1
            version = "1.2"

        header = laspy.LasHeader(point_format=point_format, version=version)
        header.offsets = offsets if offsets is not None else cloud.coords.min(axis=0)
        header.scales = scales if scales is not None else [0.001, 0.001, 0.001]

        las = laspy.LasData(header)

        las.x = cloud.coords[:, 0]
        las.y = cloud.coords[:, 1]
        las.z = cloud.coords[:, 2]

        las.classification = classification.astype(np.uint8)

        if cloud.has_colors():
            # [0-255] -> uint16 [0-65535]
            colors = cloud.colors.astype(np.uint16) * 257
            las.red = colors[:, 0]
            las.green = colors[:, 1]
            las.blue = colors[:, 2]
            logger.info("Zapisano kolory RGB")

        intensity = cloud.scalar_field('Intensity')
        if intensity is not None and len(intensity) >= n_points:
            las.intensity = np.clip(intensity[:n_points], 0, 65535).astype(np.uint16)
            logger.info("Zapisano intensywność")

        las.write(output_path)

        file_size_mb = output_path.stat().st_size / (1024 * 1024)
        logger.info(f"Zapisano: {output_path.name} ({file_size_mb:.1f} MB)")

        unique, counts = np.unique(classification, return_counts=True)
        logger.info("Statystyki klasyfikacji:")
        for cls, count in zip(unique, counts):
            pct = count / n_points * 100
            logger.info(f"  Klasa {cls}: {count:,} punktów ({pct:.1f}%)")
