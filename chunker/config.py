"""Manages the loading and validation of run configuration.

This module defines the `Config` dataclass, which carries every setting a
chunking run needs: where the training and test corpora live, where the model
and the output logs are written, whether to train a fresh model or read a
saved one, and how the Viterbi decoder should treat the test corpus. The
`load_config` function reads these values from a `config.yaml` file and
resolves relative paths against the directory that file lives in.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import yaml

DECODE_SCOPES = ("corpus", "sentence")

DEFAULT_PATHS: Dict[str, str] = {
    "training_data": "training.data",
    "training_features": "training.features",
    "model": "chunker_model.json",
    "test_data": "test.data",
    "output_log": "output.log",
    "viterbi_log": "viterbi.log",
    "best_outcome_log": "bestoutcome.log",
}

@dataclass
class Config:
    """
    A typed configuration object for one chunking run.

    Attributes:
        paths: Mapping of artifact names (see `DEFAULT_PATHS`) to file paths.
        read_model_in: When true, load the model from `paths["model"]` instead
                       of training a new one from `paths["training_data"]`.
        iterations: Number of Generalized Iterative Scaling iterations.
        cutoff: Minimum number of occurrences for a predicate to be kept.
        decode_scope: `"corpus"` decodes the whole test corpus as one Viterbi
                      chain, `"sentence"` decodes every sentence separately.
        log_space: Run the Viterbi recurrence on log-probabilities, which
                   avoids underflow on long chains.
        enable_mismatch_logging: Write one line per disagreement into the
                                 Viterbi and best-outcome logs.
    """
    paths: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PATHS))
    read_model_in: bool = False
    iterations: int = 100
    cutoff: int = 4
    decode_scope: str = "corpus"
    log_space: bool = False
    enable_mismatch_logging: bool = False

def default_config(base_dir: str | Path = ".") -> Config:
    """Builds a `Config` using the stock file names under `base_dir`."""
    base = Path(base_dir)
    return Config(paths={k: str(base / v) for k, v in DEFAULT_PATHS.items()})

def load_config(path: str = "config.yaml") -> Config:
    """
    Loads and validates a YAML configuration file into a `Config` object.

    Keys missing from the file fall back to the `Config` defaults. Every
    entry under `paths` is resolved relative to the configuration file's
    directory unless it is already absolute.

    Args:
        path: The path to the `config.yaml` file.

    Returns:
        A fully populated `Config` object.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the YAML cannot be parsed or `decode_scope` is unknown.
        TypeError: If the root of the YAML document, or its `paths`,
                   `training` or `decoding` section, is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file at {path}: {e}")

    if y is None:
        y = {}
    if not isinstance(y, dict):
        raise TypeError(f"Configuration file {path} must be a dictionary.")

    sections = {}
    for name in ("paths", "training", "decoding"):
        section = y.get(name) or {}
        if not isinstance(section, dict):
            raise TypeError(f"Section '{name}' in {path} must be a dictionary.")
        sections[name] = section

    config_dir = Path(path).parent
    paths = dict(DEFAULT_PATHS)
    paths.update({str(k): str(v) for k, v in sections["paths"].items()})
    resolved = {}
    for name, value in paths.items():
        p = Path(value)
        resolved[name] = str(p if p.is_absolute() else config_dir / p)

    training = sections["training"]
    decoding = sections["decoding"]

    decode_scope = str(decoding.get("scope", "corpus"))
    if decode_scope not in DECODE_SCOPES:
        raise ValueError(
            f"Unknown decoding scope '{decode_scope}' in {path}; expected one of {DECODE_SCOPES}."
        )

    return Config(
        paths=resolved,
        read_model_in=bool(y.get("read_model_in", False)),
        iterations=int(training.get("iterations", 100)),
        cutoff=int(training.get("cutoff", 4)),
        decode_scope=decode_scope,
        log_space=bool(decoding.get("log_space", False)),
        enable_mismatch_logging=bool(y.get("enable_mismatch_logging", False)),
    )
