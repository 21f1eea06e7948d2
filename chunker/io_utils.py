"""Provides utility functions for reading corpora and writing run artifacts.

The corpus format is plain text: sentences are separated by a blank line and
every other line holds `WORD POS TAG` separated by single spaces. Lines that do
not split into exactly that many fields are dropped while reading; this is
corpus cleaning, not an error. Models are persisted as JSON with the outcome
labels, the predicate vocabulary and the parameter matrix.
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Iterable, List

import numpy as np

from .model import MaxentModel
from .types import LabeledToken, Sentence, Token

MODEL_KEYS = ("outcomes", "predicates", "params")

def _parse_line(line: str, labeled: bool) -> Token | None:
    t = line.split(" ")
    if len(t) == 3:
        return LabeledToken(t[0], t[1], t[2]) if labeled else Token(t[0], t[1])
    if len(t) == 2 and not labeled:
        return Token(t[0], t[1])
    return None

def read_corpus(path: str, labeled: bool = True) -> List[Sentence]:
    """
    Reads a blank-line separated corpus into a list of sentences.

    Args:
        path: The path to the corpus file.
        labeled: When true every kept line must carry a tag and becomes a
                 `LabeledToken`. When false, `WORD POS` lines are accepted as
                 well and every kept line becomes a plain `Token`.

    Returns:
        The sentences in file order. Sentences left empty after dropping
        malformed lines are omitted.

    Raises:
        FileNotFoundError: If the corpus file does not exist.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Corpus file not found at: {path}")

    sentences: List[Sentence] = []
    current: Sentence = []
    for raw in text.split("\n"):
        line = raw.rstrip("\r")
        if not line.strip():
            if current:
                sentences.append(current)
                current = []
            continue
        token = _parse_line(line, labeled)
        if token is not None:
            current.append(token)
    if current:
        sentences.append(current)
    return sentences

def write_lines(path: str, lines: Iterable[str]) -> None:
    """Writes one item per line, creating parent directories as needed."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(f"{line}\n")

def read_lines(path: str) -> List[str]:
    """Reads a file written by `write_lines`, dropping blank lines."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return [line.rstrip("\r\n") for line in f if line.strip()]
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found at: {path}")

def save_model(path: str, model: MaxentModel) -> None:
    """
    Saves a trained model as JSON.

    Args:
        path: The destination path.
        model: The model to persist.
    """
    data = {
        "outcomes": list(model.outcomes),
        "predicates": list(model.predicates),
        "params": model.params.tolist(),
    }
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)

def load_model(path: str) -> MaxentModel:
    """
    Loads a model written by `save_model`.

    Raises:
        FileNotFoundError: If the model file does not exist.
        ValueError: If the file is not valid JSON.
        TypeError: If required keys are missing or the parameter matrix does
                   not match the predicate and outcome counts.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Model file not found at: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from {path}: {e}")

    if not isinstance(data, dict) or any(k not in data for k in MODEL_KEYS):
        raise TypeError(f"Model file {path} must contain the keys {MODEL_KEYS}.")

    outcomes = [str(o) for o in data["outcomes"]]
    predicates = [str(p) for p in data["predicates"]]
    try:
        params = np.asarray(data["params"], dtype=float).reshape(len(predicates), len(outcomes))
    except ValueError as e:
        raise TypeError(f"Parameter matrix in {path} does not match its vocabulary: {e}")
    return MaxentModel(outcomes, predicates, params)
