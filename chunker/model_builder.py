"""Training logic for the maximum-entropy chunk classifier.

This module turns encoded training feature sets (each ending with its
reference tag) into a `MaxentModel`. Training follows the classic
Generalized Iterative Scaling recipe:

1.  **Event collection**: `build_events` collapses identical
    (context, outcome) events into a pandas DataFrame with a `count` column.
2.  **Predicate cutoff**: predicates that occur in fewer than `cutoff` events
    are dropped from the vocabulary.
3.  **Iterative scaling**: `train_model` repeatedly compares the empirical
    (predicate, outcome) counts with the model's expected counts and moves
    each parameter by `log(observed / expected) / C`, where `C` is the largest
    number of active predicates in any event. Only pairs observed in the
    training data carry a parameter; every other pair stays at zero.
"""
from __future__ import annotations
from typing import List, Sequence

import numpy as np
import pandas as pd
from tqdm import tqdm

from .model import MaxentModel
from .types import FeatureSet

LL_TOLERANCE = 1e-4

def build_events(feature_sets: Sequence[FeatureSet]) -> pd.DataFrame:
    """
    Collapses training feature sets into a table of unique events.

    Args:
        feature_sets: Encoded tokens whose last element is the outcome tag.

    Returns:
        A DataFrame with the columns `context` (space-joined predicates),
        `outcome` and `count`, in order of first appearance.

    Raises:
        ValueError: If there are no feature sets, or one of them holds only an
                    outcome.
    """
    if not feature_sets:
        raise ValueError("No training events. Cannot build a model.")
    rows = []
    for i, fs in enumerate(feature_sets):
        if len(fs) < 2:
            raise ValueError(f"Training event {i} has no context predicates: {fs!r}")
        rows.append({"context": " ".join(fs[:-1]), "outcome": fs[-1]})
    df = pd.DataFrame(rows)
    return df.groupby(["context", "outcome"], sort=False).size().reset_index(name="count")

def _softmax(scores: np.ndarray) -> np.ndarray:
    scores = scores - scores.max(axis=1, keepdims=True)
    expd = np.exp(scores)
    return expd / expd.sum(axis=1, keepdims=True)

def train_model(
    feature_sets: Sequence[FeatureSet],
    iterations: int = 100,
    cutoff: int = 4,
    verbose: bool = True,
) -> MaxentModel:
    """
    Trains a maximum-entropy model with Generalized Iterative Scaling.

    Args:
        feature_sets: Encoded training tokens, each ending with its tag.
        iterations: Maximum number of scaling iterations.
        cutoff: Minimum number of events a predicate must appear in.
        verbose: Show a tqdm progress bar with the running log-likelihood.

    Returns:
        The trained `MaxentModel`.

    Raises:
        ValueError: If no training events are available.
    """
    events = build_events(feature_sets)
    outcomes: List[str] = list(pd.unique(events["outcome"]))
    outcome_ids = {o: i for i, o in enumerate(outcomes)}

    entries = events.assign(predicate=events["context"].str.split(" ")).explode("predicate")
    pred_counts = entries.groupby("predicate", sort=False)["count"].sum()
    kept = pred_counts[pred_counts >= cutoff]
    predicates: List[str] = list(kept.index)
    pred_ids = {p: i for i, p in enumerate(predicates)}

    if verbose:
        print(
            f"Indexed {len(events)} unique events, {len(predicates)} of "
            f"{len(pred_counts)} predicates kept (cutoff={cutoff}), {len(outcomes)} outcomes."
        )

    n_events, n_preds, n_outcomes = len(events), len(predicates), len(outcomes)
    params = np.zeros((n_preds, n_outcomes))
    if n_preds == 0:
        print("Warning: every predicate fell below the cutoff; the model will be uniform.")
        return MaxentModel(outcomes, predicates, params)

    entries = entries[entries["predicate"].isin(predicates)]
    entry_event = entries.index.to_numpy()
    entry_pred = entries["predicate"].map(pred_ids).to_numpy()
    counts = events["count"].to_numpy(dtype=float)
    event_outcome = events["outcome"].map(outcome_ids).to_numpy()

    observed = np.zeros((n_preds, n_outcomes))
    np.add.at(observed, (entry_pred, event_outcome[entry_event]), counts[entry_event])
    mask = observed > 0
    log_observed = np.log(observed, where=mask, out=np.zeros_like(observed))

    correction = max(1, int(np.bincount(entry_event, minlength=n_events).max()))
    tiny = np.finfo(float).tiny

    prev_ll = None
    progress = tqdm(range(iterations), desc="GIS", disable=not verbose)
    for _ in progress:
        scores = np.zeros((n_events, n_outcomes))
        np.add.at(scores, entry_event, params[entry_pred])
        probs = _softmax(scores)

        ll = float(np.sum(counts * np.log(np.maximum(probs[np.arange(n_events), event_outcome], tiny))))
        progress.set_postfix(loglik=f"{ll:.4f}")
        if prev_ll is not None and abs(ll - prev_ll) < LL_TOLERANCE:
            break
        prev_ll = ll

        expected = np.zeros((n_preds, n_outcomes))
        np.add.at(expected, entry_pred, probs[entry_event] * counts[entry_event, None])
        params[mask] += (log_observed[mask] - np.log(np.maximum(expected[mask], tiny))) / correction

    return MaxentModel(outcomes, predicates, params)
