"""
batch.py: Collate training examples into sparse torch tensors.

Each perspective is packed in EmbeddingBag form: a flat ``indices`` tensor
of training feature indices, a matching ``counts`` tensor of multiplicities
(usable as per_sample_weights), and ``offsets`` marking where each example's
features start.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np
import torch

from nnue_trainer.config_schema import TrainingConfig
from nnue_trainer.constants import NUM_PERSPECTIVES
from nnue_trainer.errors import FactorizationError
from nnue_trainer.features.feature_set import BaseFeatureSetFactorizer
from nnue_trainer.features.training_feature import TrainingFeature
from nnue_trainer.training.example import Example, build_example, score_to_win_rate

logger = logging.getLogger(__name__)


@dataclass
class PerspectiveFeatures:
    indices: torch.Tensor  # int64 [num_features]
    counts: torch.Tensor  # float32 [num_features]
    offsets: torch.Tensor  # int64 [batch_size]


@dataclass
class SparseBatch:
    features: Tuple[PerspectiveFeatures, PerspectiveFeatures]
    scores: torch.Tensor
    targets: torch.Tensor
    signs: torch.Tensor
    weights: torch.Tensor

    def __len__(self) -> int:
        return int(self.scores.shape[0])


def _collate_perspective(
    feature_lists: Sequence[List[TrainingFeature]], device: torch.device
) -> PerspectiveFeatures:
    lengths = np.fromiter((len(f) for f in feature_lists), dtype=np.int64, count=len(feature_lists))
    offsets = np.zeros(len(feature_lists), dtype=np.int64)
    np.cumsum(lengths[:-1], out=offsets[1:])

    total = int(lengths.sum())
    indices = np.fromiter(
        (feature.index for features in feature_lists for feature in features),
        dtype=np.int64,
        count=total,
    )
    counts = np.fromiter(
        (feature.count for features in feature_lists for feature in features),
        dtype=np.float32,
        count=total,
    )
    return PerspectiveFeatures(
        indices=torch.from_numpy(indices).to(device),
        counts=torch.from_numpy(counts).to(device),
        offsets=torch.from_numpy(offsets).to(device),
    )


def collate_examples(examples: Sequence[Example], device: str = "cpu") -> SparseBatch:
    """Pack *examples* into a SparseBatch on *device*."""
    if not examples:
        raise ValueError("Cannot collate an empty batch of examples")
    target_device = torch.device(device)

    features = tuple(
        _collate_perspective([e.training_features[p] for e in examples], target_device)
        for p in range(NUM_PERSPECTIVES)
    )
    scores = np.array([e.score for e in examples], dtype=np.float32)
    targets = score_to_win_rate(scores).astype(np.float32)
    signs = np.array([e.sign for e in examples], dtype=np.float32)
    weights = np.array([e.weight for e in examples], dtype=np.float32)

    logger.debug(
        "Collated %d examples with %d + %d training features",
        len(examples),
        features[0].indices.numel(),
        features[1].indices.numel(),
    )
    return SparseBatch(
        features=features,  # type: ignore[arg-type]
        scores=torch.from_numpy(scores).to(target_device),
        targets=torch.from_numpy(targets).to(target_device),
        signs=torch.from_numpy(signs).to(target_device),
        weights=torch.from_numpy(weights).to(target_device),
    )


class RawSample(NamedTuple):
    """Active compact indices of both perspectives plus the example's targets."""

    active_indices: Tuple[Sequence[int], Sequence[int]]
    score: float
    sign: int = 1
    weight: float = 1.0


def iter_batches(
    factorizer: BaseFeatureSetFactorizer,
    samples: Iterable[RawSample],
    config: TrainingConfig,
) -> Iterator[SparseBatch]:
    """Expand *samples* and yield SparseBatches of ``config.batch_size`` examples.

    A sample whose features cannot be factorized is dropped with a warning;
    the rest of the batch is unaffected.  The final batch may be short.
    """
    examples: List[Example] = []
    skipped = 0
    for sample in samples:
        try:
            example = build_example(
                factorizer,
                sample.active_indices,
                sample.score,
                sign=sample.sign,
                weight=sample.weight,
                collapse=config.collapse_duplicates,
            )
        except FactorizationError as e:
            skipped += 1
            logger.warning("Skipping sample: %s", e)
            continue

        examples.append(example)
        if len(examples) == config.batch_size:
            yield collate_examples(examples, config.device)
            examples = []

    if examples:
        yield collate_examples(examples, config.device)
    if skipped:
        logger.warning("Skipped %d samples with invalid features", skipped)
