"""
constants.py: Board and feature-layout constants shared across nnue_trainer.
"""

# Packed training feature word: index in the high bits, multiplicity in the low bits
TRAINING_FEATURE_STORAGE_BITS = 32
TRAINING_FEATURE_INDEX_BITS = 24
TRAINING_FEATURE_COUNT_BITS = TRAINING_FEATURE_STORAGE_BITS - TRAINING_FEATURE_INDEX_BITS

# Board geometry
SQUARE_NB = 64
COLOR_NB = 2

# Piece-square ("BonaPiece") range: index 0 is unused, then 10 piece kinds x 64 squares
NUM_PIECE_KINDS = 10
PS_END = NUM_PIECE_KINDS * SQUARE_NB + 1  # 641

# Compact dimensions of the elementary feature types
HALF_KP_DIMENSIONS = SQUARE_NB * PS_END  # 41024
K_DIMENSIONS = SQUARE_NB * COLOR_NB  # 128
P_DIMENSIONS = PS_END

# Relationship between evaluation value and win rate
PONANZA_CONSTANT = 600.0

# Perspectives of one training example
NUM_PERSPECTIVES = 2
