"""End-to-end orchestration of a chunking run.

`run` wires the stages together in a single synchronous pass:

    corpus -> encode -> score -> Viterbi / best outcome -> evaluate -> logs

Every stage raises on failure and the exception propagates to the caller
unchanged; the command-line entry point reports it once.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List

import numpy as np
from tqdm import tqdm

from .config import Config
from .evaluation import evaluate
from .features import encode_corpus
from .io_utils import load_model, read_corpus, save_model, write_lines
from .model import SequenceModel
from .model_builder import train_model
from .types import FeatureSet, LabeledToken, Metrics, Sentence
from .viterbi import decode_sentences, viterbi

@dataclass(frozen=True)
class RunResult:
    """
    The observable outcome of one run.

    Attributes:
        viterbi_tags: The decoded tag sequence for the test corpus.
        best_outcome_tags: The per-token arg-max baseline.
        viterbi_metrics: Block metrics for the Viterbi output.
        best_outcome_metrics: Block metrics for the baseline output.
    """
    viterbi_tags: List[str]
    best_outcome_tags: List[str]
    viterbi_metrics: Metrics
    best_outcome_metrics: Metrics

def acquire_model(cfg: Config) -> SequenceModel:
    """
    Loads the saved model or trains and saves a fresh one.

    When training, the encoded training events are also written to
    `paths["training_features"]`, one space-separated event per line.
    """
    if cfg.read_model_in:
        print(f"Loading model from {cfg.paths['model']}...")
        return load_model(cfg.paths["model"])

    print(f"Building training features from {cfg.paths['training_data']}...")
    sentences = read_corpus(cfg.paths["training_data"], labeled=True)
    events = encode_corpus(sentences, include_outcome=True)
    write_lines(cfg.paths["training_features"], (" ".join(fs) for fs in events))

    model = train_model(events, iterations=cfg.iterations, cutoff=cfg.cutoff)
    save_model(cfg.paths["model"], model)
    print(f"Saved model to {cfg.paths['model']}")
    return model

def score_features(model: SequenceModel, features: List[FeatureSet]) -> List[np.ndarray]:
    """Scores every feature set, checking each distribution's length."""
    k = model.num_outcomes()
    out = []
    for i, fs in enumerate(tqdm(features, desc="Scoring")):
        dist = model.score(fs)
        if len(dist) != k:
            raise ValueError(f"Model returned {len(dist)} probabilities for token {i}, expected {k}.")
        out.append(dist)
    return out

def decode(model: SequenceModel, probabilities: List[np.ndarray], sentences: List[Sentence], cfg: Config) -> List[str]:
    """Runs Viterbi over the whole corpus or sentence by sentence, per `cfg.decode_scope`."""
    if cfg.decode_scope == "sentence":
        return decode_sentences(probabilities, [len(s) for s in sentences], model, log_space=cfg.log_space)
    return viterbi(probabilities, model, log_space=cfg.log_space)

def run(cfg: Config, model: SequenceModel | None = None) -> RunResult:
    """
    Executes a full train-or-load, decode and evaluate run.

    Args:
        cfg: The run configuration.
        model: An already constructed model; when omitted `acquire_model` is
               used.

    Returns:
        The decoded tags and metrics for both decoders.
    """
    if model is None:
        model = acquire_model(cfg)

    sentences = read_corpus(cfg.paths["test_data"], labeled=True)
    features = encode_corpus(sentences)
    reference = [tok.tag for sentence in sentences for tok in sentence if isinstance(tok, LabeledToken)]

    probabilities = score_features(model, features)
    best = [model.best_outcome(dist) for dist in probabilities]
    tags = decode(model, probabilities, sentences, cfg)

    print(f"\nNumber of outcomes: {len(tags)}")
    write_lines(cfg.paths["output_log"], tags)

    log = cfg.enable_mismatch_logging
    viterbi_metrics = evaluate(tags, reference, features, log=log)
    best_metrics = evaluate(best, reference, features, log=log)
    write_lines(cfg.paths["viterbi_log"], viterbi_metrics.mismatches)
    write_lines(cfg.paths["best_outcome_log"], best_metrics.mismatches)

    return RunResult(
        viterbi_tags=tags,
        best_outcome_tags=best,
        viterbi_metrics=viterbi_metrics,
        best_outcome_metrics=best_metrics,
    )

def tag(cfg: Config, input_path: str, output_path: str, model: SequenceModel | None = None) -> List[str]:
    """
    Decodes an unlabeled corpus and writes one tag per line.

    Args:
        cfg: The run configuration; only the model and decoding settings apply.
        input_path: A corpus of `WORD POS` (or `WORD POS TAG`) lines.
        output_path: Destination of the decoded-tag log.
        model: An already constructed model; when omitted `acquire_model` is
               used.

    Returns:
        The decoded tags.
    """
    if model is None:
        model = acquire_model(cfg)
    sentences = read_corpus(input_path, labeled=False)
    probabilities = score_features(model, encode_corpus(sentences))
    tags = decode(model, probabilities, sentences, cfg)
    write_lines(output_path, tags)
    return tags
