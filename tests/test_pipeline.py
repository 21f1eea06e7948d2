from pathlib import Path

import numpy as np
import pytest

from chunker.config import default_config
from chunker.io_utils import load_model, read_lines
from chunker.pipeline import acquire_model, run, score_features, tag

DATA_DIR = Path(__file__).resolve().parents[1] / "data"

TEST_CORPUS = """The DT B
new JJ I
plan NN I
works VBZ O
. . O

It PRP B
failed VBD O
. . O
"""


class WordModel:
    """Scores a token by looking up its current word."""

    labels = ["B", "I", "O"]
    table = {"The": 0, "new": 1, "plan": 1, "It": 0}

    def num_outcomes(self):
        return 3

    def outcome_label(self, index):
        return self.labels[index]

    def score(self, feature_set):
        word = feature_set[1][2:]
        dist = np.full(3, 0.1)
        dist[self.table.get(word, 2)] = 0.8
        return dist

    def best_outcome(self, distribution):
        return self.labels[int(np.argmax(distribution))]


class BrokenModel(WordModel):
    def score(self, feature_set):
        return np.array([0.5, 0.5])


def _cfg(tmp_path: Path):
    cfg = default_config(tmp_path)
    (tmp_path / "test.data").write_text(TEST_CORPUS, encoding="utf-8")
    return cfg


def test_run_with_injected_model_decodes_and_evaluates(tmp_path: Path) -> None:
    cfg = _cfg(tmp_path)
    cfg.enable_mismatch_logging = True

    result = run(cfg, model=WordModel())

    assert result.viterbi_tags == ["B", "I", "I", "O", "O", "B", "O", "O"]
    assert result.best_outcome_tags == result.viterbi_tags
    assert result.viterbi_metrics.precision == 1.0
    assert result.viterbi_metrics.recall == 1.0
    assert read_lines(cfg.paths["output_log"]) == result.viterbi_tags
    assert read_lines(cfg.paths["viterbi_log"]) == []
    assert Path(cfg.paths["best_outcome_log"]).exists()


def test_run_writes_mismatch_logs(tmp_path: Path) -> None:
    cfg = _cfg(tmp_path)
    cfg.enable_mismatch_logging = True

    class MissesNew(WordModel):
        table = {"The": 0, "plan": 1, "It": 0}

    result = run(cfg, model=MissesNew())

    assert result.viterbi_metrics.i_wrong == 1
    lines = read_lines(cfg.paths["viterbi_log"])
    assert len(lines) == 1
    assert lines[0].startswith("[new] Expected: I, got: O in the context of: [wb1=The, w=new,")


def test_sentence_scope_matches_corpus_scope_without_transitions(tmp_path: Path) -> None:
    cfg = _cfg(tmp_path)
    corpus_tags = run(cfg, model=WordModel()).viterbi_tags

    cfg.decode_scope = "sentence"
    cfg.log_space = True
    assert run(cfg, model=WordModel()).viterbi_tags == corpus_tags


def test_model_contract_violation_is_fatal(tmp_path: Path) -> None:
    cfg = _cfg(tmp_path)

    with pytest.raises(ValueError):
        run(cfg, model=BrokenModel())
    with pytest.raises(ValueError):
        score_features(BrokenModel(), [("w=x",)])


def test_missing_test_corpus_aborts_without_output(tmp_path: Path) -> None:
    cfg = default_config(tmp_path)

    with pytest.raises(FileNotFoundError):
        run(cfg, model=WordModel())
    assert not Path(cfg.paths["output_log"]).exists()


def test_tag_decodes_unlabeled_corpus(tmp_path: Path) -> None:
    cfg = default_config(tmp_path)
    source = tmp_path / "raw.data"
    source.write_text("The DT\nnew JJ\nplan NN\n", encoding="utf-8")
    out = tmp_path / "tags.log"

    tags = tag(cfg, str(source), str(out), model=WordModel())

    assert tags == ["B", "I", "I"]
    assert read_lines(str(out)) == tags


def test_acquire_model_trains_saves_and_reloads(tmp_path: Path) -> None:
    cfg = default_config(tmp_path)
    cfg.paths["training_data"] = str(DATA_DIR / "training.data")
    cfg.paths["test_data"] = str(DATA_DIR / "test.data")
    cfg.iterations = 30
    cfg.cutoff = 1

    model = acquire_model(cfg)

    assert sorted(model.outcomes) == ["B", "I", "O"]
    features = read_lines(cfg.paths["training_features"])
    assert features[0] == "wb1=NONE w=Confidence wa1=in p1=NONE_NN p2=NN_IN p3=NONE_NN_IN B"

    cfg.read_model_in = True
    reloaded = acquire_model(cfg)
    assert reloaded.predicates == load_model(cfg.paths["model"]).predicates

    result = run(cfg, model=reloaded)
    assert len(result.viterbi_tags) == 45
    assert len(result.best_outcome_tags) == 45
