"""
Parametry Random Trees

Hiperparametry przekazywane do treningu; mapowane na argumenty
sklearn.ensemble.RandomForestClassifier.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class RandomTreesParams:
    """Hiperparametry lasu losowego"""
    max_depth: int = 25
    min_sample_count: int = 2  # min probek w wezle do podzialu
    active_var_count: int = 0  # cechy losowane w wezle (0 = sqrt(liczba cech))
    calc_var_importance: bool = True
    max_tree_count: int = 150  # warunek stopu: liczba drzew

    def validate(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.min_sample_count < 2:
            raise ValueError(f"min_sample_count must be >= 2, got {self.min_sample_count}")
        if self.active_var_count < 0:
            raise ValueError(f"active_var_count must be >= 0, got {self.active_var_count}")
        if self.max_tree_count < 1:
            raise ValueError(f"max_tree_count must be >= 1, got {self.max_tree_count}")

    def max_features(self, n_features: int):
        """Wartosc max_features dla sklearn"""
        if self.active_var_count == 0:
            return 'sqrt'
        return min(self.active_var_count, n_features)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RandomTreesParams':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
