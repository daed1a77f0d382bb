"""
feature_types.py: FeatureType metadata for the elementary NNUE input features.

Each FeatureType names one elementary feature type and the size of its
compact (inference) index range.  Active-index extraction from a position is
done by the engine; this module only describes index ranges, which is all
the factorizers need.
"""

from typing import Dict

from nnue_trainer.constants import HALF_KP_DIMENSIONS, K_DIMENSIONS, P_DIMENSIONS


class FeatureType:
    """
    Describes the compact index range of one elementary feature type.

    The dimensions attribute is the number of compact indices the deployed
    evaluation function uses for this type.
    """

    def __init__(self, name: str, dimensions: int):
        if dimensions <= 0:
            raise ValueError(f"Feature type {name!r} must have positive dimensions, got {dimensions}")
        self.name = name
        self.dimensions = dimensions

    def __repr__(self) -> str:
        return f"FeatureType({self.name!r}, {self.dimensions})"


# Feature type specifications (compact dimensions only)
HALF_KP_TYPE = FeatureType("HalfKP", HALF_KP_DIMENSIONS)
K_TYPE = FeatureType("K", K_DIMENSIONS)
P_TYPE = FeatureType("P", P_DIMENSIONS)

FEATURE_TYPES: Dict[str, FeatureType] = {
    "HalfKP": HALF_KP_TYPE,
    "K": K_TYPE,
    "P": P_TYPE,
}
