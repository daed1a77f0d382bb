"""
coalesce.py: Fold factorized training weights back into the compact input layout.

During training every compact index i activates all training features it
expands into, so the network effectively uses the sum of their weight rows.
Coalescing computes exactly that sum once per compact index, giving a weight
table indexed by compact features that evaluates identically without the
factors.
"""

import logging

import torch

from nnue_trainer.features.feature_set import BaseFeatureSetFactorizer

logger = logging.getLogger(__name__)


def coalesce_weights(factorizer: BaseFeatureSetFactorizer, weights: torch.Tensor) -> torch.Tensor:
    """Return ``[base_dimensions, ...]`` weights from ``[get_dimensions(), ...]`` ones."""
    if weights.dim() < 1 or weights.shape[0] != factorizer.get_dimensions():
        raise ValueError(
            f"Expected weights with {factorizer.get_dimensions()} rows, got shape {tuple(weights.shape)}"
        )

    rows = []
    sources = []
    scales = []
    for base_index in range(factorizer.base_dimensions):
        for feature in factorizer.get_training_features(base_index):
            rows.append(base_index)
            sources.append(feature.index)
            scales.append(feature.count)

    device = weights.device
    rows_t = torch.tensor(rows, dtype=torch.long, device=device)
    sources_t = torch.tensor(sources, dtype=torch.long, device=device)
    scales_t = torch.tensor(scales, dtype=weights.dtype, device=device)
    scales_t = scales_t.view(-1, *([1] * (weights.dim() - 1)))

    coalesced = torch.zeros(
        (factorizer.base_dimensions, *weights.shape[1:]), dtype=weights.dtype, device=device
    )
    coalesced.index_add_(0, rows_t, weights[sources_t] * scales_t)

    logger.info(
        "Coalesced %d training feature rows into %d input rows",
        factorizer.get_dimensions(),
        factorizer.base_dimensions,
    )
    return coalesced
