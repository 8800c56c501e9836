"""
MASC Classifier - trening i ewaluacja lasu losowego na cechach punktowych

Klasyfikator laczy deskryptory cech, budowe macierzy probek i model
zespolowy. Operacje nie rzucaja wyjatkow dla przewidywalnych bledow -
zwracaja (sukces, ..., komunikat).

Usage:
    clf = Classifier()
    ok, msg = clf.train(RandomTreesParams(), features, train_subset)
    ok, metrics, msg = clf.evaluate(features, test_subset)
    clf.to_file("model.pkl")
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from .model import RandomForestModel
from .params import RandomTreesParams
from .progress import ProgressSink, progress_phase
from ..config import CLASSIFIER
from ..core.subset import PointSubset
from ..errors import MascError
from ..features.feature import Feature
from ..features.sample_matrix import (
    build_labels,
    build_sample_matrix,
    get_classification_field,
    sample_indices
)

logger = logging.getLogger(__name__)


@dataclass
class AccuracyMetrics:
    """Metryki dokladnosci klasyfikatora"""
    sample_count: int = 0
    correct_count: int = 0
    ratio: float = 0.0


class Classifier:
    """
    Klasyfikator Random Trees dla chmur punktow

    Stany: nienauczony -> nauczony (po train() lub from_file()).
    Nieudany trening (blad trenera) zostawia klasyfikator nienauczony;
    bledy warunkow wstepnych nie zmieniaja stanu.
    """

    def __init__(self, classification_field: str = CLASSIFIER.CLASSIFICATION_FIELD):
        """
        Args:
            classification_field: nazwa pola skalarnego z etykietami (ground truth)
        """
        self.classification_field = classification_field
        self._model: Optional[RandomForestModel] = None

    def is_valid(self) -> bool:
        """Czy klasyfikator jest nauczony"""
        return self._model is not None and self._model.is_trained()

    def feature_names(self) -> List[str]:
        """Nazwy cech uzytych przy treningu"""
        return list(self._model.feature_names) if self._model is not None else []

    def variable_importance(self) -> Dict[str, float]:
        """Waznosc cech (gdy trening liczyl waznosc)"""
        return self._model.variable_importance() if self._model is not None else {}

    def train(
        self,
        params: RandomTreesParams,
        features: Sequence[Feature],
        train_subset: Optional[PointSubset] = None,
        progress: Optional[ProgressSink] = None
    ) -> Tuple[bool, str]:
        """
        Trenuje klasyfikator

        Args:
            params: hiperparametry lasu
            features: uporzadkowana lista cech (jedna chmura)
            train_subset: podzbior treningowy (None = cala chmura)
            progress: odbiorca postepu

        Returns:
            (sukces, komunikat bledu)
        """
        if not features:
            return False, "Training method called without any feature (no feature provided)"
        if features[0] is None or features[0].cloud is None:
            return False, "Invalid feature (no associated point cloud)"

        cloud = features[0].cloud

        if train_subset is not None and train_subset.cloud is not cloud:
            return False, "Invalid train subset (associated point cloud is different)"

        try:
            params.validate()
        except ValueError as e:
            return False, f"Invalid parameters: {e}"

        try:
            get_classification_field(cloud, self.classification_field)
        except MascError as e:
            return False, str(e)

        sample_count = train_subset.size() if train_subset is not None else cloud.size()
        logger.info(f"Training data: {sample_count:,} samples with {len(features)} feature(s)")

        model = RandomForestModel()
        with progress_phase(progress, "Training classifier") as sink:
            try:
                labels = build_labels(cloud, train_subset, self.classification_field)
                data = build_sample_matrix(features, cloud, train_subset)
            except MascError as e:
                return False, str(e)

            sink.pump()

            try:
                model.train(data, labels, params, [f.name for f in features], sink)
            except Exception as e:
                # Bledy sklearn/numpy: komunikat wprost, poprzedni model odrzucony
                self._model = None
                logger.error(f"Training failed: {e}")
                return False, str(e) or e.__class__.__name__

        if not model.is_trained():
            self._model = None
            return False, "Training failed for an unknown reason..."

        self._model = model
        return True, ""

    def evaluate(
        self,
        features: Sequence[Feature],
        test_subset: Optional[PointSubset],
        progress: Optional[ProgressSink] = None
    ) -> Tuple[bool, AccuracyMetrics, str]:
        """
        Ewaluuje klasyfikator na podzbiorze testowym

        Args:
            features: te same cechy (i kolejnosc) co przy treningu
            test_subset: podzbior testowy (wymagany)
            progress: odbiorca postepu

        Returns:
            (sukces, AccuracyMetrics, komunikat bledu)
        """
        metrics = AccuracyMetrics()

        if not self.is_valid():
            return False, metrics, "Classifier hasn't been trained yet"
        if not features:
            return False, metrics, "Evaluation method called without any feature (no feature provided)"
        if test_subset is None:
            return False, metrics, "No test subset provided"
        if len(features) != self._model.n_features:
            return False, metrics, (f"Invalid feature count: {len(features)} "
                                    f"(classifier was trained with {self._model.n_features})")

        cloud = test_subset.cloud

        try:
            truth = build_labels(cloud, test_subset, self.classification_field)
            logger.info(f"Testing data: {test_subset.size():,} samples with {len(features)} feature(s)")
            data = build_sample_matrix(features, cloud, test_subset)
        except MascError as e:
            return False, metrics, str(e)

        if len(data) == 0:
            return True, metrics, ""

        with progress_phase(progress, "Evaluating classifier") as sink:
            try:
                predictions = self._model.predict(data, sink)
            except Exception as e:
                return False, metrics, str(e) or e.__class__.__name__

        predicted = np.trunc(predictions.astype(np.float64)).astype(np.int64)

        metrics.sample_count = int(len(truth))
        metrics.correct_count = int(np.count_nonzero(predicted == truth))
        metrics.ratio = metrics.correct_count / metrics.sample_count

        logger.info(f"Accuracy: {metrics.correct_count:,}/{metrics.sample_count:,} ({metrics.ratio:.4f})")
        return True, metrics, ""

    def classify(
        self,
        features: Sequence[Feature],
        subset: Optional[PointSubset] = None,
        progress: Optional[ProgressSink] = None
    ) -> Tuple[bool, np.ndarray, str]:
        """
        Przewiduje klasy punktow

        Args:
            features: te same cechy (i kolejnosc) co przy treningu
            subset: podzbior punktow (None = cala chmura)
            progress: odbiorca postepu

        Returns:
            (sukces, (N,) klasy int32, komunikat bledu)
        """
        empty = np.array([], dtype=np.int32)

        if not self.is_valid():
            return False, empty, "Classifier hasn't been trained yet"
        if not features:
            return False, empty, "Classification method called without any feature (no feature provided)"
        if features[0] is None or features[0].cloud is None:
            return False, empty, "Invalid feature (no associated point cloud)"
        if len(features) != self._model.n_features:
            return False, empty, (f"Invalid feature count: {len(features)} "
                                  f"(classifier was trained with {self._model.n_features})")

        cloud = subset.cloud if subset is not None else features[0].cloud

        try:
            n_samples = len(sample_indices(cloud, subset))
            logger.info(f"Classifying {n_samples:,} points with {len(features)} feature(s)")
            data = build_sample_matrix(features, cloud, subset)
        except MascError as e:
            return False, empty, str(e)

        if len(data) == 0:
            return True, empty, ""

        with progress_phase(progress, "Classifying points") as sink:
            try:
                predictions = self._model.predict(data, sink)
            except Exception as e:
                return False, empty, str(e) or e.__class__.__name__

        return True, np.trunc(predictions.astype(np.float64)).astype(np.int32), ""

    def to_file(self, filename: str, progress: Optional[ProgressSink] = None) -> Tuple[bool, str]:
        """Zapisuje klasyfikator do pliku"""
        if self._model is None:
            logger.warning("Classifier hasn't been trained, can't save it")
            return False, "Classifier hasn't been trained, can't save it"

        with progress_phase(progress, "Saving classifier"):
            try:
                self._model.save(filename)
            except MascError as e:
                return False, str(e)

        logger.info(f"Classifier file saved to: {filename}")
        return True, ""

    def from_file(self, filename: str, progress: Optional[ProgressSink] = None) -> Tuple[bool, str]:
        """
        Wczytuje klasyfikator z pliku

        Plik poprawny, ale z nienauczonym modelem: sukces + ostrzezenie.
        Blad odczytu: porazka, poprzedni stan bez zmian.
        """
        with progress_phase(progress, "Loading classifier"):
            try:
                model = RandomForestModel.load(filename)
            except MascError as e:
                return False, str(e)

        self._model = model

        if not model.is_trained():
            logger.warning("Loaded classifier doesn't seem to be trained")

        return True, ""
