"""
ML Module - klasyfikator Random Trees dla chmur punktow

Zawiera:
- Classifier, AccuracyMetrics: trening/ewaluacja/zapis (classifier.py)
- RandomTreesParams: hiperparametry (params.py)
- EnsembleModel, RandomForestModel: model sklearn (model.py)
- ProgressSink: postep dlugich operacji (progress.py)
"""

from .params import RandomTreesParams
from .progress import ProgressSink, NullProgress, progress_phase
from .model import EnsembleModel, RandomForestModel
from .classifier import Classifier, AccuracyMetrics

__all__ = [
    'RandomTreesParams',
    'ProgressSink',
    'NullProgress',
    'progress_phase',
    'EnsembleModel',
    'RandomForestModel',
    'Classifier',
    'AccuracyMetrics',
]
