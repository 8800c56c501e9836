"""
Centralna konfiguracja klasyfikatora MASC

Wszystkie stale i parametry w jednym miejscu dla latwej modyfikacji.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClassifierConfig:
    """Konfiguracja klasyfikatora Random Forest"""
    CLASSIFICATION_FIELD: str = "Classification"
    TREES_PER_STEP: int = 10  # drzewa dokladane miedzy kolejnymi pump() postepu
    PREDICT_BATCH_SIZE: int = 100_000
    N_JOBS: int = -1  # -1 = wszystkie rdzenie
    RANDOM_STATE: int = 42
    MODEL_FORMAT_VERSION: int = 1


@dataclass(frozen=True)
class SamplingConfig:
    """Konfiguracja podzialu na zbior treningowy/testowy"""
    TEST_DATA_RATIO: float = 0.2
    RANDOM_STATE: int = 42


@dataclass(frozen=True)
class LoggingConfig:
    """Formaty logowania (CLI)"""
    FORMAT: str = '%(asctime)s - %(levelname)s - %(message)s'
    VERBOSE_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Singleton instances
CLASSIFIER = ClassifierConfig()
SAMPLING = SamplingConfig()
LOGGING = LoggingConfig()
