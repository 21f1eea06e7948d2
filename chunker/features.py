"""Contextual feature encoding for BIO chunking.

Every token is described by a three-token window (previous, current, next)
plus the part-of-speech tags of that window:

    wb1  = word before the current token
    w    = current word, with cardinals normalised to TIME or NUMBER
    wa1  = word after the current token
    p1   = POS-before_POS-current
    p2   = POS-current_POS-after
    p3   = POS-before_POS-current_POS-after

Positions outside the sentence use the sentinel `NONE`. The emitted order is
fixed, because the classifier consumes the features exactly as given.
"""
from __future__ import annotations
from typing import Iterable, List

from .types import FeatureSet, LabeledToken, Sentence

__all__ = ["FEATURE_KEYS", "TIME_UNITS", "NONE", "normalize_word", "encode", "encode_corpus"]

NONE = "NONE"
FEATURE_KEYS = ("wb1", "w", "wa1", "p1", "p2", "p3")
TIME_UNITS = ("second", "minute", "hour", "day", "week", "month", "year")

def normalize_word(word: str, pos: str, next_word: str) -> str:
    """
    Replaces cardinal numbers with a generic `TIME` or `NUMBER` marker.

    A token whose POS contains `CD` becomes `TIME` when any of the
    `TIME_UNITS` occurs as a substring of the following word (so `5 years`
    and `3 days` both qualify), and `NUMBER` otherwise. Other tokens are
    returned unchanged.
    """
    if "CD" not in pos:
        return word
    if any(unit in next_word for unit in TIME_UNITS):
        return "TIME"
    return "NUMBER"

def encode(sentence: Sentence, include_outcome: bool = False) -> List[FeatureSet]:
    """
    Builds one feature set per token of `sentence`.

    Args:
        sentence: The ordered tokens of one sentence.
        include_outcome: Append the token's reference tag as the final element,
                         which is the layout training events use.

    Returns:
        A list of feature tuples, one per token, in sentence order.

    Raises:
        ValueError: If `include_outcome` is set and a token carries no tag.
    """
    n = len(sentence)
    out: List[FeatureSet] = []
    for i, token in enumerate(sentence):
        if i > 0:
            wb1, wb1p = sentence[i - 1].word, sentence[i - 1].pos
        else:
            wb1, wb1p = NONE, NONE

        if i + 1 < n:
            wa1, wa1p = sentence[i + 1].word, sentence[i + 1].pos
        else:
            wa1, wa1p = NONE, NONE

        wp = token.pos
        w = normalize_word(token.word, wp, wa1)

        feats = [
            f"wb1={wb1}",
            f"w={w}",
            f"wa1={wa1}",
            f"p1={wb1p}_{wp}",
            f"p2={wp}_{wa1p}",
            f"p3={wb1p}_{wp}_{wa1p}",
        ]
        if include_outcome:
            if not isinstance(token, LabeledToken):
                raise ValueError(f"Token '{token.word}' at position {i} has no reference tag.")
            feats.append(token.tag)
        out.append(tuple(feats))
    return out

def encode_corpus(sentences: Iterable[Sentence], include_outcome: bool = False) -> List[FeatureSet]:
    """Encodes every sentence and concatenates the results in corpus order."""
    features: List[FeatureSet] = []
    for sentence in sentences:
        features.extend(encode(sentence, include_outcome))
    return features
