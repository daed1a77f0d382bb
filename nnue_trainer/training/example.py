"""
example.py: One training example and the per-perspective feature lists it carries.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from nnue_trainer.constants import NUM_PERSPECTIVES, PONANZA_CONSTANT
from nnue_trainer.features.feature_set import BaseFeatureSetFactorizer
from nnue_trainer.features.training_feature import TrainingFeature


def score_to_win_rate(score: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Map an evaluation score to an expected win rate in (0, 1)."""
    return 1.0 / (1.0 + np.exp(-np.asarray(score, dtype=np.float64) / PONANZA_CONSTANT))


@dataclass
class Example:
    """
    A single training example.

    training_features holds one list per perspective (side to move first),
    score is the target evaluation from the side to move's point of view,
    sign is +1 or -1 depending on which side the score is for, and weight
    scales this example's contribution to the loss.
    """

    training_features: Tuple[List[TrainingFeature], List[TrainingFeature]] = field(
        default_factory=lambda: ([], [])
    )
    score: float = 0.0
    sign: int = 1
    weight: float = 1.0

    @property
    def win_rate(self) -> float:
        return float(score_to_win_rate(self.score))


def collapse_training_features(features: Iterable[TrainingFeature]) -> List[TrainingFeature]:
    """Sort *features* and merge records that share an index.

    The first record of each index absorbs the multiplicities of the rest,
    so the input records are modified in place.
    """
    collapsed: List[TrainingFeature] = []
    for feature in sorted(features):
        if collapsed and collapsed[-1].index == feature.index:
            collapsed[-1] += feature
        else:
            collapsed.append(feature)
    return collapsed


def build_example(
    factorizer: BaseFeatureSetFactorizer,
    active_indices: Sequence[Iterable[int]],
    score: float,
    sign: int = 1,
    weight: float = 1.0,
    collapse: bool = True,
) -> Example:
    """Expand the active compact indices of both perspectives into an Example.

    Args:
        factorizer: Feature set factorizer of the trained network.
        active_indices: One iterable of active compact indices per perspective.
        score: Target evaluation.
        sign: +1 or -1.
        weight: Loss weight of the example.
        collapse: Merge duplicate training features per perspective.

    Raises:
        ValueError: On a malformed example; FactorizationError subclasses
            propagate from the factorizer and no example is produced.
    """
    if len(active_indices) != NUM_PERSPECTIVES:
        raise ValueError(
            f"Expected {NUM_PERSPECTIVES} perspectives of active indices, got {len(active_indices)}"
        )
    if sign not in (1, -1):
        raise ValueError(f"sign must be 1 or -1, got {sign}")

    perspectives = []
    for indices in active_indices:
        training_features: List[TrainingFeature] = []
        for base_index in indices:
            factorizer.append_training_features(base_index, training_features)
        if collapse:
            training_features = collapse_training_features(training_features)
        perspectives.append(training_features)

    return Example(
        training_features=(perspectives[0], perspectives[1]),
        score=score,
        sign=sign,
        weight=weight,
    )
