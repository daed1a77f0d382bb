"""
factorizer.py: Leaf factorizers that expand one elementary feature type.

A leaf factorizer turns one compact index of its own feature type into one
or more training features.  The first training feature is always the
pass-through index (equal to the compact index); any further ones are
"factors", correlated sub-features placed at or above the compact
dimensionality.  Factored leaves are declared as an ordered tuple of
FeatureProperties, one per block of the leaf's expanded range, and built
with the helpers below so block offsets are accumulated in one place.
"""

from typing import List, NamedTuple, Sequence

from nnue_trainer.constants import HALF_KP_DIMENSIONS, PS_END, SQUARE_NB
from nnue_trainer.errors import IndexOutOfRangeError, InvariantViolationError
from nnue_trainer.features.feature_types import HALF_KP_TYPE, P_TYPE, FeatureType
from nnue_trainer.features.training_feature import TrainingFeature


class Factorizer:
    """
    Default leaf factorizer: the training features are the input features.

    Subclasses that add factors override get_dimensions() and
    append_training_features().
    """

    def __init__(self, feature_type: FeatureType):
        self.feature_type = feature_type

    @property
    def name(self) -> str:
        return self.feature_type.name

    @property
    def compact_dimensions(self) -> int:
        """Number of compact (inference) indices of this feature type."""
        return self.feature_type.dimensions

    def get_dimensions(self) -> int:
        """Number of training feature indices of this feature type."""
        return self.compact_dimensions

    def check_base_index(self, base_index: int) -> None:
        if not 0 <= base_index < self.compact_dimensions:
            raise IndexOutOfRangeError(
                f"Index {base_index} is outside the {self.compact_dimensions} "
                f"compact dimensions of {self.name}"
            )

    def append_training_features(
        self, base_index: int, training_features: List[TrainingFeature]
    ) -> None:
        """Append the training features of compact index *base_index*."""
        self.check_base_index(base_index)
        training_features.append(TrainingFeature(base_index))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.compact_dimensions} -> {self.get_dimensions()})"


class FeatureProperties(NamedTuple):
    """One block of a factored leaf's expanded range."""

    active: bool
    dimensions: int


def append_base_feature(
    properties: FeatureProperties,
    base_index: int,
    training_features: List[TrainingFeature],
) -> int:
    """Append the pass-through feature and return the size of its block."""
    training_features.append(TrainingFeature(base_index))
    return properties.dimensions


def inherit_features_if_required(
    index_offset: int,
    properties: FeatureProperties,
    base_index: int,
    training_features: List[TrainingFeature],
    factorizer: Factorizer,
) -> int:
    """Append *factorizer*'s features for *base_index* shifted by *index_offset*.

    Returns the number of dimensions consumed, 0 if the block is inactive.
    """
    if not properties.active:
        return 0

    if properties.dimensions != factorizer.get_dimensions():
        raise InvariantViolationError(
            f"Factor block declares {properties.dimensions} dimensions but "
            f"{factorizer.name} provides {factorizer.get_dimensions()}"
        )

    start = len(training_features)
    factorizer.append_training_features(base_index, training_features)
    for feature in training_features[start:]:
        if feature.index >= factorizer.get_dimensions():
            raise InvariantViolationError(
                f"{factorizer.name} produced index {feature.index} outside its "
                f"{factorizer.get_dimensions()} dimensions"
            )
        feature.shift_index(index_offset)
    return properties.dimensions


def get_active_dimensions(properties: Sequence[FeatureProperties]) -> int:
    return sum(p.dimensions for p in properties if p.active)


HALF_K_TYPE = FeatureType("HalfK", SQUARE_NB)


class HalfKPFactorizer(Factorizer):
    """
    HalfKP factorized into HalfKP + HalfK + P.

    A HalfKP index encodes (king square, piece square) as
    ``king_square * PS_END + piece_square``.  Besides the pass-through
    HalfKP index it emits the king square alone (HalfK) and the piece
    square alone (P), so weights for a piece square are shared across all
    king positions while training.
    """

    def __init__(self, half_k: bool = True, p: bool = True):
        super().__init__(HALF_KP_TYPE)
        self._half_k = Factorizer(HALF_K_TYPE)
        self._p = Factorizer(P_TYPE)
        self.properties = (
            FeatureProperties(True, HALF_KP_DIMENSIONS),
            FeatureProperties(half_k, self._half_k.get_dimensions()),
            FeatureProperties(p, self._p.get_dimensions()),
        )

    def get_dimensions(self) -> int:
        return get_active_dimensions(self.properties)

    def append_training_features(
        self, base_index: int, training_features: List[TrainingFeature]
    ) -> None:
        self.check_base_index(base_index)
        king_square, piece_square = divmod(base_index, PS_END)

        index_offset = append_base_feature(self.properties[0], base_index, training_features)
        index_offset += inherit_features_if_required(
            index_offset, self.properties[1], king_square, training_features, self._half_k
        )
        index_offset += inherit_features_if_required(
            index_offset, self.properties[2], piece_square, training_features, self._p
        )

        if index_offset != self.get_dimensions():
            raise InvariantViolationError(
                f"HalfKP factor blocks cover {index_offset} of {self.get_dimensions()} dimensions"
            )
