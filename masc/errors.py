"""Wyjatki klasyfikatora MASC."""


class MascError(Exception):
    """Bazowy wyjatek pakietu."""


class PreconditionError(MascError):
    """Niespelniony warunek wstepny (brak cech, inna chmura, brak pola Classification)."""


class SourceResolutionError(MascError):
    """Cecha nie daje sie zamienic na poprawne zrodlo wartosci."""


class SampleMatrixError(MascError):
    """Blad numeryczny/alokacji podczas budowy macierzy probek."""


class TrainerError(MascError):
    """Blad zewnetrznego trenera (scikit-learn)."""


class ModelIOError(MascError):
    """Blad zapisu lub odczytu pliku modelu."""
