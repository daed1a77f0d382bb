# nnue_trainer/features/__init__.py

from .builder import build_factorizer
from .factorizer import FeatureProperties, Factorizer, HalfKPFactorizer
from .feature_set import (
    BaseFeatureSetFactorizer,
    FeatureSegment,
    FeatureSetFactorizer,
    SingleFeatureSetFactorizer,
    make_feature_set_factorizer,
)
from .feature_types import FEATURE_TYPES, FeatureType
from .training_feature import TrainingFeature

__all__ = [
    "build_factorizer",
    "FeatureProperties",
    "Factorizer",
    "HalfKPFactorizer",
    "BaseFeatureSetFactorizer",
    "FeatureSegment",
    "FeatureSetFactorizer",
    "SingleFeatureSetFactorizer",
    "make_feature_set_factorizer",
    "FEATURE_TYPES",
    "FeatureType",
    "TrainingFeature",
]
