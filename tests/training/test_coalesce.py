"""Tests for nnue_trainer.training.coalesce: folding factor weights into input weights."""

import pytest
import torch

from conftest import SyntheticFactorizer
from nnue_trainer.features import HalfKPFactorizer, make_feature_set_factorizer
from nnue_trainer.features.factorizer import Factorizer
from nnue_trainer.features.feature_types import FEATURE_TYPES
from nnue_trainer.training import coalesce_weights


class TestCoalesceWeights:
    def test_rows_sum_their_training_features(self, three_type_set):
        weights = torch.arange(three_type_set.get_dimensions(), dtype=torch.float64).unsqueeze(1)
        coalesced = coalesce_weights(three_type_set, weights)

        assert coalesced.shape == (three_type_set.base_dimensions, 1)
        # Index 7 expands to [7, 13]
        assert coalesced[7, 0].item() == 20.0
        # Index 3 expands to [3, 10]
        assert coalesced[3, 0].item() == 13.0

    def test_sparse_sum_is_preserved(self, three_type_set):
        """Summing expanded rows equals summing coalesced compact rows."""
        torch.manual_seed(0)
        weights = torch.randn(three_type_set.get_dimensions(), 8, dtype=torch.float64)
        coalesced = coalesce_weights(three_type_set, weights)

        active = [0, 4, 5, 8]
        expanded = [
            f.index for i in active for f in three_type_set.get_training_features(i)
        ]
        assert torch.allclose(weights[expanded].sum(0), coalesced[active].sum(0))

    def test_without_factors_is_identity(self):
        feature_set = make_feature_set_factorizer(
            [Factorizer(FEATURE_TYPES["K"]), Factorizer(FEATURE_TYPES["P"])]
        )
        weights = torch.randn(feature_set.get_dimensions(), 3)
        assert torch.equal(coalesce_weights(feature_set, weights), weights)

    def test_half_kp_row(self):
        feature_set = make_feature_set_factorizer([HalfKPFactorizer()])
        weights = torch.zeros(feature_set.get_dimensions())
        weights[41024 + 2] = 1.0  # HalfK for king square 2
        weights[41024 + 64 + 5] = 10.0  # P for piece square 5
        coalesced = coalesce_weights(feature_set, weights)

        assert coalesced[2 * 641 + 5].item() == 11.0
        assert coalesced[2 * 641 + 6].item() == 1.0
        assert coalesced[3 * 641 + 5].item() == 10.0

    def test_wrong_row_count_rejected(self):
        feature_set = make_feature_set_factorizer([SyntheticFactorizer("A", 3, 5)])
        with pytest.raises(ValueError, match="Expected weights with 5 rows"):
            coalesce_weights(feature_set, torch.zeros(4, 2))
