"""Unit tests for nnue_trainer.features.factorizer: leaf factorizers."""

import pytest

from nnue_trainer.constants import HALF_KP_DIMENSIONS, PS_END, SQUARE_NB
from nnue_trainer.errors import IndexOutOfRangeError, InvariantViolationError
from nnue_trainer.features import FEATURE_TYPES, Factorizer, FeatureType, HalfKPFactorizer
from nnue_trainer.features.factorizer import (
    FeatureProperties,
    get_active_dimensions,
    inherit_features_if_required,
)


# ---------------------------------------------------------------------------
# Feature types
# ---------------------------------------------------------------------------


class TestFeatureTypes:
    def test_registry_dimensions(self):
        assert FEATURE_TYPES["HalfKP"].dimensions == 41024
        assert FEATURE_TYPES["K"].dimensions == 128
        assert FEATURE_TYPES["P"].dimensions == 641

    def test_registry_names_match_keys(self):
        for key, feature_type in FEATURE_TYPES.items():
            assert feature_type.name == key

    def test_non_positive_dimensions_rejected(self):
        with pytest.raises(ValueError, match="positive dimensions"):
            FeatureType("Empty", 0)


# ---------------------------------------------------------------------------
# Default leaf
# ---------------------------------------------------------------------------


class TestDefaultFactorizer:
    def test_dimensions_equal_compact(self):
        factorizer = Factorizer(FEATURE_TYPES["P"])
        assert factorizer.compact_dimensions == 641
        assert factorizer.get_dimensions() == 641

    def test_appends_pass_through_only(self):
        factorizer = Factorizer(FEATURE_TYPES["K"])
        features = []
        factorizer.append_training_features(100, features)
        assert [(f.index, f.count) for f in features] == [(100, 1)]

    def test_out_of_range_index_rejected(self):
        factorizer = Factorizer(FEATURE_TYPES["K"])
        with pytest.raises(IndexOutOfRangeError, match="128 compact dimensions of K"):
            factorizer.append_training_features(128, [])


# ---------------------------------------------------------------------------
# FeatureProperties helpers
# ---------------------------------------------------------------------------


class TestFeatureProperties:
    def test_active_dimensions_skip_inactive_blocks(self):
        properties = (
            FeatureProperties(True, 10),
            FeatureProperties(False, 5),
            FeatureProperties(True, 3),
        )
        assert get_active_dimensions(properties) == 13

    def test_inactive_block_appends_nothing(self):
        features = []
        consumed = inherit_features_if_required(
            10, FeatureProperties(False, 128), 0, features, Factorizer(FEATURE_TYPES["K"])
        )
        assert consumed == 0
        assert features == []

    def test_active_block_shifts_by_offset(self):
        features = []
        consumed = inherit_features_if_required(
            1000, FeatureProperties(True, 128), 7, features, Factorizer(FEATURE_TYPES["K"])
        )
        assert consumed == 128
        assert [f.index for f in features] == [1007]

    def test_declared_dimensions_must_match(self):
        with pytest.raises(InvariantViolationError, match="declares 100 dimensions"):
            inherit_features_if_required(
                0, FeatureProperties(True, 100), 0, [], Factorizer(FEATURE_TYPES["K"])
            )


# ---------------------------------------------------------------------------
# HalfKP factorization
# ---------------------------------------------------------------------------


class TestHalfKPFactorizer:
    KING = 5
    PIECE = 17
    INDEX = KING * PS_END + PIECE

    def test_dimensions_with_all_factors(self):
        factorizer = HalfKPFactorizer()
        assert factorizer.compact_dimensions == HALF_KP_DIMENSIONS
        assert factorizer.get_dimensions() == HALF_KP_DIMENSIONS + SQUARE_NB + PS_END

    def test_emits_pass_through_king_and_piece(self):
        features = []
        HalfKPFactorizer().append_training_features(self.INDEX, features)
        assert [f.index for f in features] == [
            self.INDEX,
            HALF_KP_DIMENSIONS + self.KING,
            HALF_KP_DIMENSIONS + SQUARE_NB + self.PIECE,
        ]
        assert all(f.count == 1 for f in features)

    def test_without_half_k_factor(self):
        factorizer = HalfKPFactorizer(half_k=False)
        features = []
        factorizer.append_training_features(self.INDEX, features)
        assert factorizer.get_dimensions() == HALF_KP_DIMENSIONS + PS_END
        assert [f.index for f in features] == [self.INDEX, HALF_KP_DIMENSIONS + self.PIECE]

    def test_without_any_factor(self):
        factorizer = HalfKPFactorizer(half_k=False, p=False)
        features = []
        factorizer.append_training_features(self.INDEX, features)
        assert factorizer.get_dimensions() == HALF_KP_DIMENSIONS
        assert [f.index for f in features] == [self.INDEX]

    def test_last_index_stays_in_range(self):
        factorizer = HalfKPFactorizer()
        features = []
        factorizer.append_training_features(HALF_KP_DIMENSIONS - 1, features)
        assert max(f.index for f in features) == factorizer.get_dimensions() - 1

    def test_out_of_range_index_rejected(self):
        with pytest.raises(IndexOutOfRangeError):
            HalfKPFactorizer().append_training_features(HALF_KP_DIMENSIONS, [])
