"""
Podzbiór punktów chmury (lista globalnych indeksów)

Używany do ograniczenia treningu/ewaluacji do wybranej próbki punktów.
"""

import numpy as np
from typing import Optional, Tuple
import logging

from sklearn.model_selection import train_test_split

from .point_cloud import PointCloud
from ..config import CLASSIFIER, SAMPLING

logger = logging.getLogger(__name__)


class PointSubset:
    """
    Uporządkowany podzbiór punktów jednej chmury

    Usage:
        subset = PointSubset(cloud, [0, 5, 7])
        train, test = PointSubset.full(cloud).split(test_ratio=0.2)
    """

    def __init__(self, cloud: PointCloud, indices):
        """
        Args:
            cloud: Chmura, do której odnoszą się indeksy
            indices: Globalne indeksy punktów (każdy < cloud.size())
        """
        if cloud is None:
            raise ValueError("Subset requires an associated cloud")

        indices = np.asarray(indices, dtype=np.int64).ravel()
        if indices.size and (indices.min() < 0 or indices.max() >= cloud.size()):
            raise ValueError(f"Subset indices out of range [0, {cloud.size()}) "
                             f"for cloud '{cloud.name}'")

        indices.setflags(write=False)
        self._cloud = cloud
        self._indices = indices

    @classmethod
    def full(cls, cloud: PointCloud) -> 'PointSubset':
        """Podzbiór zawierający wszystkie punkty"""
        return cls(cloud, np.arange(cloud.size()))

    @classmethod
    def from_mask(cls, cloud: PointCloud, mask: np.ndarray) -> 'PointSubset':
        """Podzbiór z maski bool (N,)"""
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (cloud.size(),):
            raise ValueError(f"Mask shape {mask.shape} does not match cloud size {cloud.size()}")
        return cls(cloud, np.flatnonzero(mask))

    @property
    def cloud(self) -> PointCloud:
        return self._cloud

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    def size(self) -> int:
        return len(self._indices)

    def __len__(self) -> int:
        return self.size()

    def get_point_global_index(self, i: int) -> int:
        return int(self._indices[i])

    def split(self,
              test_ratio: float = SAMPLING.TEST_DATA_RATIO,
              random_state: Optional[int] = SAMPLING.RANDOM_STATE,
              stratify: bool = False,
              field_name: str = CLASSIFIER.CLASSIFICATION_FIELD) -> Tuple['PointSubset', 'PointSubset']:
        """
        Losowy podział na podzbiór treningowy i testowy

        Args:
            test_ratio: Część punktów do zbioru testowego (0-1)
            random_state: Ziarno losowości
            stratify: Czy zachować proporcje klas z pola etykiet
            field_name: Nazwa pola z etykietami (dla stratify)

        Returns:
            (train, test)
        """
        if not 0.0 < test_ratio < 1.0:
            raise ValueError(f"Test ratio must be in (0, 1), got {test_ratio}")

        labels = None
        if stratify:
            field = self._cloud.scalar_field(field_name)
            if field is None or len(field) < self._cloud.size():
                raise ValueError(f"Stratified split requires a valid "
                                 f"'{field_name}' field")
            labels = np.trunc(field[self._indices]).astype(np.int32)

        train_idx, test_idx = train_test_split(
            np.asarray(self._indices),
            test_size=test_ratio,
            random_state=random_state,
            stratify=labels
        )

        logger.info(f"Split {self.size():,} points: train={len(train_idx):,}, test={len(test_idx):,}")
        return PointSubset(self._cloud, train_idx), PointSubset(self._cloud, test_idx)

    def __repr__(self):
        return f"{self.__class__.__name__}(cloud='{self._cloud.name}', size={self.size()})"
