"""
Shared fixtures and synthetic feature types for the nnue_trainer test suite.
"""

from typing import List

import pytest

from nnue_trainer.features import (
    Factorizer,
    FeatureType,
    TrainingFeature,
    make_feature_set_factorizer,
)


class SyntheticFactorizer(Factorizer):
    """Leaf with *dimensions - compact* extra factors.

    Compact index i emits its pass-through feature and, when the type has
    extra factors, the single factor ``compact + i % extra``.
    """

    def __init__(self, name: str, compact: int, dimensions: int):
        super().__init__(FeatureType(name, compact))
        self._dimensions = dimensions

    def get_dimensions(self) -> int:
        return self._dimensions

    def append_training_features(
        self, base_index: int, training_features: List[TrainingFeature]
    ) -> None:
        self.check_base_index(base_index)
        training_features.append(TrainingFeature(base_index))
        extra = self._dimensions - self.compact_dimensions
        if extra:
            training_features.append(TrainingFeature(self.compact_dimensions + base_index % extra))


@pytest.fixture
def two_type_set():
    """[A(3 -> 5), B(2 -> 2)]: B has no extra factors."""
    return make_feature_set_factorizer(
        [SyntheticFactorizer("A", 3, 5), SyntheticFactorizer("B", 2, 2)]
    )


@pytest.fixture
def three_type_set():
    """[A(3 -> 5), B(2 -> 3), C(4 -> 6)]."""
    return make_feature_set_factorizer(
        [
            SyntheticFactorizer("A", 3, 5),
            SyntheticFactorizer("B", 2, 3),
            SyntheticFactorizer("C", 4, 6),
        ]
    )
