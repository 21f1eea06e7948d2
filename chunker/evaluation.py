"""Chunk-level evaluation of a predicted BIO tag stream against a reference.

The evaluator walks both tag streams once, position by position, and runs two
independent block automata: one over the reference tags and one over the
predicted tags. Both use the same transition function:

    tag  | idle                  | inside
    -----+-----------------------+-----------------------------------
    I    | -> inside             | -> inside
    B    | -> idle               | -> inside, closes a block
    O    | -> idle               | -> idle,   closes a block

A block closed by the reference automaton counts as an expected block. A
block closed by the produced automaton counts as correct when the two tags
agree at that position, and as wrong otherwise. A block only opens on an `I`
tag, so single-token chunks are not counted.

Precision, recall and F-score are computed with IEEE float semantics: a corpus
with no chunks reports `nan` or `inf` instead of raising.
"""
from __future__ import annotations
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, Tuple

import numpy as np

from .types import FeatureSet, Metrics

__all__ = ["BlockState", "BlockScan", "block_transition", "evaluate", "format_mismatch", "format_report"]

BlockState = Literal["idle", "inside"]

def block_transition(state: BlockState, tag: str) -> Tuple[BlockState, bool]:
    """
    Advances one block automaton by a single tag.

    Args:
        state: The current automaton state.
        tag: The tag seen at this position.

    Returns:
        The new state, and whether this tag closed a block that was open.
        Tags outside `B`, `I`, `O` leave the state unchanged.
    """
    if tag == "I":
        return "inside", False
    if tag == "B":
        return state, state == "inside"
    if tag == "O":
        return "idle", state == "inside"
    return state, False

@dataclass
class BlockScan:
    """Transient scan state carried across the tag streams."""
    expected_state: BlockState = "idle"
    produced_state: BlockState = "idle"
    expected_blocks: int = 0
    correct_produced_blocks: int = 0
    wrong_produced_blocks: int = 0
    wrong_by_tag: Counter = field(default_factory=Counter)

    def step(self, predicted: str, reference: str) -> None:
        match = predicted == reference
        if not match:
            self.wrong_by_tag[reference] += 1

        self.expected_state, closed = block_transition(self.expected_state, reference)
        if closed:
            self.expected_blocks += 1

        self.produced_state, closed = block_transition(self.produced_state, predicted)
        if closed:
            if match:
                self.correct_produced_blocks += 1
            else:
                self.wrong_produced_blocks += 1

def _ratio(num: float, den: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))

def _word_of(context: FeatureSet) -> str:
    for feat in context:
        if feat.startswith("w="):
            return feat[2:]
    return context[1] if len(context) > 1 else ""

def format_mismatch(expected: str, got: str, context: FeatureSet) -> str:
    """Renders one disagreement as a single mismatch-log line."""
    return (
        f"[{_word_of(context)}] Expected: {expected}, got: {got} "
        f"in the context of: [{', '.join(context)}]"
    )

def evaluate(
    predicted: Sequence[str],
    reference: Sequence[str],
    context: Optional[Sequence[FeatureSet]] = None,
    log: bool = False,
) -> Metrics:
    """
    Scores a predicted tag stream against the reference at the block level.

    The streams are compared position by position up to the shorter of the
    two. The function is pure: identical inputs always give identical metrics.

    Args:
        predicted: The tags produced by a decoder.
        reference: The gold tags.
        context: The feature set of every compared position; only needed when
                 `log` is true.
        log: Collect one formatted line per mismatch into `Metrics.mismatches`.

    Returns:
        The populated `Metrics`.

    Raises:
        ValueError: If logging is requested without enough context entries.
    """
    n = min(len(predicted), len(reference))
    if log and (context is None or len(context) < n):
        raise ValueError(
            f"Mismatch logging needs a feature context for each of the {n} compared positions."
        )

    scan = BlockScan()
    mismatches: List[str] = []
    for idx in range(n):
        out, exp = predicted[idx], reference[idx]
        if log and out != exp:
            mismatches.append(format_mismatch(exp, out, context[idx]))
        scan.step(out, exp)

    correct = scan.correct_produced_blocks
    precision = _ratio(correct, correct + scan.wrong_produced_blocks)
    recall = _ratio(correct, scan.expected_blocks)
    f_score = _ratio(2 * precision * recall, precision + recall)

    return Metrics(
        b_wrong=scan.wrong_by_tag["B"],
        i_wrong=scan.wrong_by_tag["I"],
        o_wrong=scan.wrong_by_tag["O"],
        expected_blocks=scan.expected_blocks,
        correct_produced_blocks=correct,
        wrong_produced_blocks=scan.wrong_produced_blocks,
        precision=precision,
        recall=recall,
        f_score=f_score,
        mismatches=tuple(mismatches),
    )

def _format_ratio(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return f"{value:.4f}"

def format_report(metrics: Metrics) -> str:
    """
    Formats mismatch counts and block metrics the way a run prints them.

    Ratios use four decimal places; non-finite ratios print as `NaN`,
    `Infinity` or `-Infinity`.
    """
    return "\n".join([
        f"Got {metrics.b_wrong} B wrong",
        f"Got {metrics.i_wrong} I wrong",
        f"Got {metrics.o_wrong} O wrong",
        f"Precision = {_format_ratio(metrics.precision)}",
        f"Recall = {_format_ratio(metrics.recall)}",
        f"F-score = {_format_ratio(metrics.f_score)}",
    ])
