"""
feature_set.py: Factorizer for an ordered set of feature types.

A feature set concatenates the index ranges of its feature types.  For a set
``[head, *tail]`` the tail owns the low end of the compact space
(``[0, tail.base_dimensions)``) and the head sits above it, so routing a
compact index needs a single comparison against the tail's size before
recursing into exactly one branch.

Training feature layout of the whole set, with C the compact and D the
training dimensionality:

    [0, C)  pass-through features, numerically equal to the compact index
    [C, D)  extra factors of each feature type, last listed type first

Leaves produce factors local to themselves (``[compact, dims)``).  The
recursion threads the outermost ``base_dimensions`` (= C by default) down to
the base case, which lifts factors to start at it; each level then shifts
its head's factors past the factor blocks of its tail.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from nnue_trainer.errors import IndexOutOfRangeError, InvariantViolationError
from nnue_trainer.features.factorizer import Factorizer
from nnue_trainer.features.training_feature import TrainingFeature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureSegment:
    """Where one feature type's training features land in the set's layout."""

    name: str
    compact_start: int
    compact_end: int
    factor_start: int
    factor_end: int

    @property
    def compact_dimensions(self) -> int:
        return self.compact_end - self.compact_start

    @property
    def factor_dimensions(self) -> int:
        return self.factor_end - self.factor_start


@contextmanager
def _rollback_on_error(training_features: List[TrainingFeature]) -> Iterator[int]:
    """Truncate *training_features* to its entry length if the body raises."""
    start = len(training_features)
    try:
        yield start
    except Exception:
        del training_features[start:]
        raise


class BaseFeatureSetFactorizer:
    """Shared bookkeeping of the single-type and recursive feature set factorizers."""

    factorizers: Tuple[Factorizer, ...]
    base_dimensions: int

    def get_dimensions(self) -> int:
        raise NotImplementedError

    def append_training_features(
        self,
        base_index: int,
        training_features: List[TrainingFeature],
        base_dimensions: Optional[int] = None,
    ) -> None:
        raise NotImplementedError

    @property
    def feature_names(self) -> List[str]:
        return [f.name for f in self.factorizers]

    def check_base_index(self, base_index: int) -> None:
        if not 0 <= base_index < self.base_dimensions:
            raise IndexOutOfRangeError(
                f"Index {base_index} is outside the {self.base_dimensions} compact "
                f"dimensions of feature set {self.feature_names}"
            )

    def get_training_features(self, base_index: int) -> List[TrainingFeature]:
        """Return the training features of one compact index as a new list."""
        training_features: List[TrainingFeature] = []
        self.append_training_features(base_index, training_features)
        return training_features

    def layout(self) -> List[FeatureSegment]:
        """Describe the compact and factor ranges of every feature type, in set order."""
        segments = []
        compact_end = self.base_dimensions
        factor_end = self.get_dimensions()
        for factorizer in self.factorizers:
            compact = factorizer.compact_dimensions
            extra = factorizer.get_dimensions() - compact
            segments.append(
                FeatureSegment(
                    name=factorizer.name,
                    compact_start=compact_end - compact,
                    compact_end=compact_end,
                    factor_start=factor_end - extra,
                    factor_end=factor_end,
                )
            )
            compact_end -= compact
            factor_end -= extra
        return segments

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.feature_names}, "
            f"{self.base_dimensions} -> {self.get_dimensions()})"
        )


class SingleFeatureSetFactorizer(BaseFeatureSetFactorizer):
    """Feature set holding exactly one feature type."""

    def __init__(self, factorizer: Factorizer):
        dimensions = factorizer.get_dimensions()
        if dimensions < factorizer.compact_dimensions:
            raise ValueError(
                f"{factorizer.name} has {dimensions} training dimensions, fewer than "
                f"its {factorizer.compact_dimensions} compact dimensions"
            )
        self.factorizer = factorizer
        self.factorizers = (factorizer,)
        self.base_dimensions = factorizer.compact_dimensions
        self._dimensions = dimensions

    def get_dimensions(self) -> int:
        return self._dimensions

    def append_training_features(
        self,
        base_index: int,
        training_features: List[TrainingFeature],
        base_dimensions: Optional[int] = None,
    ) -> None:
        if base_dimensions is None:
            base_dimensions = self.base_dimensions
        self.check_base_index(base_index)

        with _rollback_on_error(training_features) as start:
            self.factorizer.append_training_features(base_index, training_features)

            for feature in training_features[start:]:
                index = feature.index
                if index >= self._dimensions:
                    raise InvariantViolationError(
                        f"{self.factorizer.name} produced index {index} outside its "
                        f"{self._dimensions} training dimensions"
                    )
                if index >= self.base_dimensions:
                    feature.shift_index(base_dimensions - self.base_dimensions)


class FeatureSetFactorizer(BaseFeatureSetFactorizer):
    """Feature set of a head feature type followed by a tail feature set."""

    def __init__(
        self,
        head: SingleFeatureSetFactorizer,
        tail: Union[SingleFeatureSetFactorizer, "FeatureSetFactorizer"],
    ):
        self.head = head
        self.tail = tail
        self.factorizers = head.factorizers + tail.factorizers
        self.base_dimensions = head.base_dimensions + tail.base_dimensions
        self._dimensions = head.get_dimensions() + tail.get_dimensions()

    def get_dimensions(self) -> int:
        return self._dimensions

    def append_training_features(
        self,
        base_index: int,
        training_features: List[TrainingFeature],
        base_dimensions: Optional[int] = None,
    ) -> None:
        if base_dimensions is None:
            base_dimensions = self.base_dimensions
        self.check_base_index(base_index)

        boundary = self.tail.base_dimensions
        if base_index < boundary:
            self.tail.append_training_features(base_index, training_features, base_dimensions)
            return

        head_base = self.head.base_dimensions
        head_factor_end = base_dimensions + self.head.get_dimensions() - head_base
        factor_shift = self.tail.get_dimensions() - self.tail.base_dimensions

        with _rollback_on_error(training_features) as start:
            self.head.append_training_features(
                base_index - boundary, training_features, base_dimensions
            )

            for feature in training_features[start:]:
                index = feature.index
                if index < head_base:
                    feature.shift_index(boundary)
                elif base_dimensions <= index < head_factor_end:
                    feature.shift_index(factor_shift)
                else:
                    raise InvariantViolationError(
                        f"{self.head.factorizer.name} produced index {index}, neither "
                        f"below {head_base} nor in [{base_dimensions}, {head_factor_end})"
                    )


def make_feature_set_factorizer(
    factorizers: Sequence[Factorizer],
) -> Union[SingleFeatureSetFactorizer, FeatureSetFactorizer]:
    """Compose leaf factorizers, in order, into one feature set factorizer."""
    if not factorizers:
        raise ValueError("A feature set needs at least one feature type")

    result: Union[SingleFeatureSetFactorizer, FeatureSetFactorizer]
    result = SingleFeatureSetFactorizer(factorizers[-1])
    for factorizer in reversed(factorizers[:-1]):
        result = FeatureSetFactorizer(SingleFeatureSetFactorizer(factorizer), result)

    logger.debug(
        "Composed feature set %s: %d compact -> %d training dimensions",
        result.feature_names,
        result.base_dimensions,
        result.get_dimensions(),
    )
    return result
