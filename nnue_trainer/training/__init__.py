# nnue_trainer/training/__init__.py

from .batch import PerspectiveFeatures, RawSample, SparseBatch, collate_examples, iter_batches
from .coalesce import coalesce_weights
from .example import Example, build_example, collapse_training_features, score_to_win_rate

__all__ = [
    "PerspectiveFeatures",
    "RawSample",
    "SparseBatch",
    "collate_examples",
    "iter_batches",
    "coalesce_weights",
    "Example",
    "build_example",
    "collapse_training_features",
    "score_to_win_rate",
]
