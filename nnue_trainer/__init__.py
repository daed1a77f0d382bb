"""
nnue_trainer — training-feature factorization for NNUE evaluation functions.

Public API re-exports.  Import from here rather than reaching into
sub-modules directly.
"""

from nnue_trainer.errors import (
    FactorizationError,
    FeatureOverflowError,
    IndexOutOfRangeError,
    InvariantViolationError,
)
from nnue_trainer.features import (
    FEATURE_TYPES,
    FeatureSegment,
    FeatureSetFactorizer,
    FeatureType,
    Factorizer,
    HalfKPFactorizer,
    SingleFeatureSetFactorizer,
    TrainingFeature,
    build_factorizer,
    make_feature_set_factorizer,
)
from nnue_trainer.training import Example, build_example, collapse_training_features

__all__ = [
    "FactorizationError",
    "FeatureOverflowError",
    "IndexOutOfRangeError",
    "InvariantViolationError",
    "FEATURE_TYPES",
    "FeatureSegment",
    "FeatureSetFactorizer",
    "FeatureType",
    "Factorizer",
    "HalfKPFactorizer",
    "SingleFeatureSetFactorizer",
    "TrainingFeature",
    "build_factorizer",
    "make_feature_set_factorizer",
    "Example",
    "build_example",
    "collapse_training_features",
]
