"""
builder.py: Build a feature set factorizer from configuration.
"""

import logging

from nnue_trainer.config_schema import FeaturesConfig
from nnue_trainer.features.factorizer import Factorizer, HalfKPFactorizer
from nnue_trainer.features.feature_set import BaseFeatureSetFactorizer, make_feature_set_factorizer
from nnue_trainer.features.feature_types import FEATURE_TYPES

logger = logging.getLogger(__name__)


def build_factorizer(config: FeaturesConfig) -> BaseFeatureSetFactorizer:
    """Resolve the configured feature types and compose their factorizers."""
    factorizers = []
    for name in config.feature_set:
        if name not in FEATURE_TYPES:
            raise ValueError(
                f"Unknown feature type {name!r}; expected one of {sorted(FEATURE_TYPES)}"
            )
        if name == "HalfKP" and config.factorize:
            factorizers.append(HalfKPFactorizer(half_k=config.half_k_factor, p=config.p_factor))
        else:
            factorizers.append(Factorizer(FEATURE_TYPES[name]))

    factorizer = make_feature_set_factorizer(factorizers)
    logger.info(
        "Feature set %s: %d input dimensions, %d training dimensions",
        "+".join(factorizer.feature_names),
        factorizer.base_dimensions,
        factorizer.get_dimensions(),
    )
    return factorizer
