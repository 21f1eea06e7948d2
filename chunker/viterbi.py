"""First-order Viterbi decoding over per-token outcome distributions.

The state space holds the model's K real outcomes plus two pseudo-states,
`start` (index K) and `finish` (index K + 1). Scores and backpointers live in
two `(t, K + 2)` numpy matrices indexed by (time, state). Each step keeps the
predecessor with the best running score; ties always go to the lowest state
index, matching a left-to-right scan with a strictly-greater comparison.

By default the recurrence multiplies raw probabilities. Long chains underflow
to zero that way, after which every comparison ties and the lowest index wins.
`log_space=True` sums log-probabilities instead, which keeps the scores finite
while applying the same tie-break.
"""
from __future__ import annotations
from typing import List, Sequence

import numpy as np

from .model import SequenceModel

__all__ = ["viterbi", "decode_sentences"]

def _as_matrix(probabilities: Sequence[Sequence[float]], k: int) -> np.ndarray:
    for i, dist in enumerate(probabilities):
        if len(dist) != k:
            raise ValueError(
                f"Distribution at position {i} has {len(dist)} entries, "
                f"but the model declares {k} outcomes."
            )
    return np.asarray(probabilities, dtype=float).reshape(len(probabilities), k)

def viterbi(
    probabilities: Sequence[Sequence[float]],
    model: SequenceModel,
    log_space: bool = False,
) -> List[str]:
    """
    Finds the most likely label sequence for a chain of distributions.

    Args:
        probabilities: One outcome distribution per token, in time order.
        model: The model that produced the distributions; supplies the outcome
               count and the labels.
        log_space: Decode with summed log-probabilities instead of products.

    Returns:
        One outcome label per input distribution.

    Raises:
        ValueError: If a distribution's length differs from the model's
                    outcome count.
    """
    s = model.num_outcomes()
    start, finish = s, s + 1
    t = len(probabilities)
    if t == 0:
        return []

    p = _as_matrix(probabilities, s)
    if log_space:
        with np.errstate(divide="ignore"):
            p = np.log(p)
        combine = np.add
        floor = -np.inf
    else:
        combine = np.multiply
        floor = 0.0

    v = np.full((t, s + 2), floor)
    b = np.zeros((t, s + 2), dtype=int)

    # start -> first states
    v[0, :s] = p[0]
    b[0, :s] = start

    states = np.arange(s)
    for i in range(1, t):
        # cand[k, j]: score of reaching state j at time i through state k.
        cand = combine(v[i - 1, :s, None], p[i, None, :])
        best = np.argmax(cand, axis=0)
        v[i, :s] = cand[best, states]
        b[i, :s] = best

    # last states -> finish
    b[t - 1, finish] = int(np.argmax(v[t - 1, :s]))
    v[t - 1, finish] = v[t - 1, b[t - 1, finish]]

    output: List[str] = []
    pointer = b[t - 1, finish]
    time = t - 1
    while pointer != start:
        output.append(model.outcome_label(int(pointer)))
        pointer = b[time, pointer]
        time -= 1

    output.reverse()
    return output

def decode_sentences(
    probabilities: Sequence[Sequence[float]],
    lengths: Sequence[int],
    model: SequenceModel,
    log_space: bool = False,
) -> List[str]:
    """
    Decodes each sentence as an independent chain and concatenates the paths.

    Args:
        probabilities: Distributions for the whole corpus, in order.
        lengths: Number of tokens in each sentence; must sum to the number of
                 distributions.
        model: The model that produced the distributions.
        log_space: Passed through to `viterbi`.

    Raises:
        ValueError: If `lengths` does not cover `probabilities` exactly.
    """
    if sum(lengths) != len(probabilities):
        raise ValueError(
            f"Sentence lengths sum to {sum(lengths)}, but {len(probabilities)} distributions were given."
        )
    output: List[str] = []
    offset = 0
    for n in lengths:
        output.extend(viterbi(probabilities[offset : offset + n], model, log_space=log_space))
        offset += n
    return output
