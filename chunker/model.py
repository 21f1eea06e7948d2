from __future__ import annotations
from typing import Dict, Protocol, Sequence

import numpy as np

from .types import FeatureSet

__all__ = ["SequenceModel", "MaxentModel"]

class SequenceModel(Protocol):
    """
    The narrow scoring interface the decoder and the pipeline rely on.

    Any object providing these four methods can be plugged into
    `chunker.viterbi.viterbi` and `chunker.pipeline.run`.
    """
    def num_outcomes(self) -> int: ...

    def score(self, feature_set: FeatureSet) -> np.ndarray: ...

    def outcome_label(self, index: int) -> str: ...

    def best_outcome(self, distribution: Sequence[float]) -> str: ...

class MaxentModel:
    """
    A conditional maximum-entropy classifier over string predicates.

    The model holds one parameter per (predicate, outcome) pair. Scoring a
    feature set sums the parameter rows of its known predicates and turns the
    totals into a probability distribution with a softmax. Predicates that
    were not seen during training are ignored.

    Attributes:
        outcomes: The outcome labels, indexed by outcome id.
        predicates: The predicate vocabulary, indexed by row of `params`.
        params: A `(len(predicates), len(outcomes))` parameter matrix.
    """
    def __init__(self, outcomes: Sequence[str], predicates: Sequence[str], params: np.ndarray):
        params = np.asarray(params, dtype=float)
        if params.shape != (len(predicates), len(outcomes)):
            raise ValueError(
                f"Parameter matrix has shape {params.shape}, expected "
                f"{(len(predicates), len(outcomes))}."
            )
        if not outcomes:
            raise ValueError("A model needs at least one outcome.")
        self.outcomes = list(outcomes)
        self.predicates = list(predicates)
        self.params = params
        self._index: Dict[str, int] = {p: i for i, p in enumerate(self.predicates)}

    def num_outcomes(self) -> int:
        return len(self.outcomes)

    def outcome_label(self, index: int) -> str:
        return self.outcomes[index]

    def score(self, feature_set: FeatureSet) -> np.ndarray:
        """
        Returns the outcome distribution for one feature set.

        Args:
            feature_set: The predicates describing a single token.

        Returns:
            A float array of length `num_outcomes()` that sums to one.
        """
        rows = [self._index[p] for p in feature_set if p in self._index]
        totals = self.params[rows].sum(axis=0) if rows else np.zeros(len(self.outcomes))
        totals = totals - totals.max()
        expd = np.exp(totals)
        return expd / expd.sum()

    def best_outcome(self, distribution: Sequence[float]) -> str:
        """Returns the label of the most probable outcome; the lowest id wins ties."""
        return self.outcomes[int(np.argmax(distribution))]
