from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Literal, Tuple, Union

__all__ = ["Tag", "Token", "LabeledToken", "Sentence", "FeatureSet", "Metrics"]

Tag = Literal["B", "I", "O"]

# One feature string per entry, e.g. ("wb1=NONE", "w=He", ...).
FeatureSet = Tuple[str, ...]

@dataclass(frozen=True)
class Token:
    """
    A single corpus token as read from a `WORD POS [TAG]` line.

    Attributes:
        word: The surface form of the token.
        pos: The part-of-speech tag assigned in the corpus.
    """
    word: str
    pos: str

@dataclass(frozen=True)
class LabeledToken(Token):
    """
    A token carrying its reference chunk tag.

    Used for training data and for the reference side of an evaluation.

    Attributes:
        tag: The BIO chunk tag from the third column of the corpus line.
             Required; there is no implicit `O`.
    """
    tag: Tag

Sentence = List[Union[Token, LabeledToken]]

@dataclass(frozen=True)
class Metrics:
    """
    Block-level agreement between a predicted and a reference tag stream.

    The three `*_wrong` counters are keyed by the *reference* tag at each
    disagreeing position. The ratios follow IEEE float semantics, so a corpus
    without any chunks yields `nan` (or `inf`) rather than an exception.

    Attributes:
        b_wrong: Mismatches where the reference tag was `B`.
        i_wrong: Mismatches where the reference tag was `I`.
        o_wrong: Mismatches where the reference tag was `O`.
        expected_blocks: Blocks closed in the reference stream.
        correct_produced_blocks: Produced blocks closed on an agreeing tag.
        wrong_produced_blocks: Produced blocks closed on a disagreeing tag.
        precision: correct / (correct + wrong).
        recall: correct / expected.
        f_score: Harmonic mean of precision and recall.
        mismatches: One formatted line per disagreement, when logging is on.
    """
    b_wrong: int
    i_wrong: int
    o_wrong: int
    expected_blocks: int
    correct_produced_blocks: int
    wrong_produced_blocks: int
    precision: float
    recall: float
    f_score: float
    mismatches: Tuple[str, ...] = field(default_factory=tuple)
