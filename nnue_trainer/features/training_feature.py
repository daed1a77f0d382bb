"""
training_feature.py: Packed index + multiplicity record for one training feature.

A TrainingFeature is a single unsigned 32-bit word: the expanded-space index
sits in the high INDEX_BITS and the multiplicity (how many elementary
contributions collapsed onto that index) in the low COUNT_BITS.  Comparing
the packed words orders records by index first and count second, which is
what lets a sorted feature list be merged in a single pass.

Every operation checks its bit budget before writing; the packed word is
never left truncated or wrapped.
"""

from nnue_trainer.constants import (
    TRAINING_FEATURE_COUNT_BITS,
    TRAINING_FEATURE_INDEX_BITS,
)
from nnue_trainer.errors import (
    FeatureOverflowError,
    IndexOutOfRangeError,
    InvariantViolationError,
)


class TrainingFeature:
    """One index of the training feature space together with its multiplicity."""

    INDEX_BITS = TRAINING_FEATURE_INDEX_BITS
    COUNT_BITS = TRAINING_FEATURE_COUNT_BITS
    MAX_INDEX = (1 << INDEX_BITS) - 1
    MAX_COUNT = (1 << COUNT_BITS) - 1

    __slots__ = ("_index_and_count",)

    def __init__(self, index: int):
        if not 0 <= index <= self.MAX_INDEX:
            raise IndexOutOfRangeError(
                f"Training feature index {index} does not fit in {self.INDEX_BITS} bits"
            )
        self._index_and_count = (index << self.COUNT_BITS) | 1

    @property
    def index(self) -> int:
        return self._index_and_count >> self.COUNT_BITS

    @property
    def count(self) -> int:
        return self._index_and_count & self.MAX_COUNT

    @property
    def packed(self) -> int:
        """The raw packed word."""
        return self._index_and_count

    def merge(self, other: "TrainingFeature") -> "TrainingFeature":
        """Add *other*'s multiplicity to this record in place.

        Raises:
            InvariantViolationError: If the two records have different indices.
            FeatureOverflowError: If the summed multiplicity exceeds COUNT_BITS.
        """
        if other.index != self.index:
            raise InvariantViolationError(
                f"Cannot merge training feature {other.index} into {self.index}"
            )
        total = self.count + other.count
        if total > self.MAX_COUNT:
            raise FeatureOverflowError(
                f"Multiplicity {total} of training feature {self.index} "
                f"does not fit in {self.COUNT_BITS} bits"
            )
        self._index_and_count += other.count
        return self

    def __iadd__(self, other: "TrainingFeature") -> "TrainingFeature":
        return self.merge(other)

    def shift_index(self, offset: int) -> None:
        """Move the stored index by *offset*, keeping the multiplicity."""
        shifted = self.index + offset
        if not 0 <= shifted <= self.MAX_INDEX:
            raise FeatureOverflowError(
                f"Shifting training feature {self.index} by {offset} gives {shifted}, "
                f"outside the {self.INDEX_BITS}-bit index range"
            )
        self._index_and_count += offset << self.COUNT_BITS

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrainingFeature):
            return NotImplemented
        return self._index_and_count == other._index_and_count

    def __lt__(self, other: "TrainingFeature") -> bool:
        return self._index_and_count < other._index_and_count

    def __le__(self, other: "TrainingFeature") -> bool:
        return self._index_and_count <= other._index_and_count

    def __gt__(self, other: "TrainingFeature") -> bool:
        return self._index_and_count > other._index_and_count

    def __ge__(self, other: "TrainingFeature") -> bool:
        return self._index_and_count >= other._index_and_count

    # Mutable record
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TrainingFeature(index={self.index}, count={self.count})"
