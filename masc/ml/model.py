"""
Ensemble model - waski interfejs do lasu losowego (scikit-learn)

Klasyfikator MASC traktuje model jak czarna skrzynke:
train / predict / is_trained / save / load.

Zawiera:
- EnsembleModel - abstrakcyjna klasa bazowa
- RandomForestModel - sklearn RandomForestClassifier
"""

import numpy as np
from typing import Dict, List, Optional
from abc import ABC, abstractmethod
from pathlib import Path
import os
import pickle
import tempfile
import logging

from sklearn.ensemble import RandomForestClassifier
from sklearn.exceptions import NotFittedError
from sklearn.utils.validation import check_is_fitted

from .params import RandomTreesParams
from .progress import NullProgress, ProgressSink
from ..config import CLASSIFIER
from ..errors import ModelIOError, TrainerError

logger = logging.getLogger(__name__)


class EnsembleModel(ABC):
    """Abstrakcyjna klasa bazowa dla modeli zespolowych"""

    @abstractmethod
    def train(self, X: np.ndarray, y: np.ndarray, params: RandomTreesParams,
              feature_names: Optional[List[str]] = None,
              progress: Optional[ProgressSink] = None) -> None:
        """Trenuje model"""
        pass

    @abstractmethod
    def predict(self, X: np.ndarray, progress: Optional[ProgressSink] = None) -> np.ndarray:
        """Przewiduje klasy"""
        pass

    @abstractmethod
    def is_trained(self) -> bool:
        pass

    @abstractmethod
    def save(self, path: str) -> None:
        """Zapisuje model"""
        pass

    @classmethod
    @abstractmethod
    def load(cls, path: str) -> 'EnsembleModel':
        """Wczytuje model"""
        pass


def column_means(X: np.ndarray) -> np.ndarray:
    """Srednie kolumn z pominieciem NaN (0 dla kolumn bez wartosci)"""
    valid = ~np.isnan(X)
    counts = valid.sum(axis=0)
    sums = np.where(valid, X, 0).sum(axis=0, dtype=np.float64)
    means = np.zeros(X.shape[1], dtype=np.float64)
    np.divide(sums, counts, out=means, where=counts > 0)
    return means.astype(np.float32)


class RandomForestModel(EnsembleModel):
    """
    Random Forest dla macierzy probek

    Las jest budowany przyrostowo (warm_start) po CLASSIFIER.TREES_PER_STEP
    drzew, a miedzy krokami wywolywane jest progress.pump().

    Usage:
        model = RandomForestModel()
        model.train(X_train, y_train, RandomTreesParams(), feature_names)
        predictions = model.predict(X_test)
        model.save("model.pkl")
    """

    def __init__(
        self,
        n_jobs: int = CLASSIFIER.N_JOBS,
        random_state: int = CLASSIFIER.RANDOM_STATE
    ):
        """
        Args:
            n_jobs: liczba watkow (-1 = wszystkie)
            random_state: ziarno losowosci
        """
        self.n_jobs = n_jobs
        self.random_state = random_state

        self.model: Optional[RandomForestClassifier] = None
        self.fill_values: np.ndarray = np.array([], dtype=np.float32)
        self.feature_names: List[str] = []
        self.params: Dict = {}

    @property
    def n_features(self) -> int:
        return len(self.fill_values)

    def train(
        self,
        X: np.ndarray,
        y: np.ndarray,
        params: RandomTreesParams,
        feature_names: Optional[List[str]] = None,
        progress: Optional[ProgressSink] = None
    ) -> None:
        """
        Trenuje las losowy

        Args:
            X: (N, F) macierz cech
            y: (N,) etykiety klas
            params: hiperparametry
            feature_names: nazwy cech
            progress: odbiorca postepu
        """
        params.validate()
        progress = progress or NullProgress()
        n_features = X.shape[1]

        self.feature_names = list(feature_names or [f"feature_{i}" for i in range(n_features)])
        self.params = params.to_dict()

        # NaN (brakujace wartosci) -> srednia kolumny z treningu
        self.fill_values = column_means(X)
        X = self._fill_missing(X)

        model = RandomForestClassifier(
            n_estimators=min(CLASSIFIER.TREES_PER_STEP, params.max_tree_count),
            max_depth=params.max_depth,
            min_samples_split=params.min_sample_count,
            max_features=params.max_features(n_features),
            n_jobs=self.n_jobs,
            random_state=self.random_state,
            warm_start=True,
            verbose=0
        )

        logger.info(f"Training Random Forest on {len(X):,} samples, {n_features} features "
                    f"(max {params.max_tree_count} trees)")

        n_trees = 0
        while n_trees < params.max_tree_count:
            n_trees = min(n_trees + CLASSIFIER.TREES_PER_STEP, params.max_tree_count)
            model.set_params(n_estimators=n_trees)
            try:
                model.fit(X, y)
            except (ValueError, MemoryError) as e:
                raise TrainerError(str(e) or e.__class__.__name__) from e
            progress.pump()
            logger.debug(f"  {n_trees}/{params.max_tree_count} trees")

        self.model = model

        if params.calc_var_importance:
            for name, imp in sorted(self.variable_importance().items(), key=lambda x: -x[1])[:5]:
                logger.info(f"  Feature '{name}': {imp:.4f}")

    def _fill_missing(self, X: np.ndarray) -> np.ndarray:
        nan_mask = np.isnan(X)
        if not nan_mask.any():
            return X
        logger.info(f"Replacing {nan_mask.sum():,} missing value(s) by column means")
        X = X.copy()
        for i in range(X.shape[1]):
            X[nan_mask[:, i], i] = self.fill_values[i]
        return X

    def is_trained(self) -> bool:
        if self.model is None:
            return False
        try:
            check_is_fitted(self.model)
        except (NotFittedError, TypeError):
            return False
        return True

    def predict(self, X: np.ndarray, progress: Optional[ProgressSink] = None) -> np.ndarray:
        """Przewiduje klasy (w batchach dla duzych macierzy)"""
        if not self.is_trained():
            raise ValueError("Model not trained. Call train() first.")

        progress = progress or NullProgress()
        X = self._fill_missing(X)

        n_samples = len(X)
        batch_size = CLASSIFIER.PREDICT_BATCH_SIZE
        predictions = np.empty(n_samples, dtype=self.model.classes_.dtype)

        for start in range(0, n_samples, batch_size):
            end = min(start + batch_size, n_samples)
            predictions[start:end] = self.model.predict(X[start:end])
            progress.pump()

        return predictions

    def variable_importance(self) -> Dict[str, float]:
        """Waznosc cech (pusty slownik gdy nie liczona lub brak modelu)"""
        if not self.is_trained() or not self.params.get('calc_var_importance', False):
            return {}
        return {name: float(imp) for name, imp in zip(self.feature_names, self.model.feature_importances_)}

    def save(self, path: str) -> None:
        """Zapisuje model do pliku (atomowo: plik tymczasowy + os.replace)"""
        path = Path(path)
        data = {
            'format_version': CLASSIFIER.MODEL_FORMAT_VERSION,
            'model': self.model,
            'fill_values': self.fill_values,
            'feature_names': self.feature_names,
            'params': self.params
        }

        tmp_path = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode='wb',
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False
            ) as f:
                tmp_path = f.name
                pickle.dump(data, f)
            os.replace(tmp_path, path)
        except (OSError, pickle.PicklingError) as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise ModelIOError(f"Can't save classifier to '{path}': {e}") from e

        logger.info(f"Model saved to {path}")

    @classmethod
    def load(cls, path: str) -> 'RandomForestModel':
        """Wczytuje model z pliku"""
        path = Path(path)
        if not path.exists():
            raise ModelIOError(f"Model not found: {path}")

        try:
            with open(path, 'rb') as f:
                data = pickle.load(f)
        except Exception as e:
            # Uszkodzony plik: pickle rzuca rozne wyjatki (ValueError, TypeError, IndexError...)
            raise ModelIOError(f"Can't read classifier file '{path}': {e}") from e

        if not isinstance(data, dict) or 'format_version' not in data:
            raise ModelIOError(f"'{path}' is not a classifier file")

        version = data['format_version']
        if not isinstance(version, int) or isinstance(version, bool):
            raise ModelIOError(f"'{path}' has an invalid classifier file version: {version!r}")
        if version > CLASSIFIER.MODEL_FORMAT_VERSION:
            raise ModelIOError(f"Unsupported classifier file version {version}")

        try:
            instance = cls()
            instance.model = data.get('model')
            instance.fill_values = np.asarray(data.get('fill_values', []), dtype=np.float32)
            instance.feature_names = list(data.get('feature_names', []))
            instance.params = dict(data.get('params', {}))
        except (TypeError, ValueError) as e:
            raise ModelIOError(f"'{path}' contains an invalid classifier: {e}") from e

        logger.info(f"Model loaded from {path}")
        return instance
