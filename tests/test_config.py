from pathlib import Path

import pytest

from chunker.config import DEFAULT_PATHS, Config, default_config, load_config


def test_load_config_resolves_paths_and_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
paths:
  training_data: data/train.txt
  model: /abs/model.json
read_model_in: true
training:
  iterations: 12
  cutoff: 2
decoding:
  scope: sentence
  log_space: true
enable_mismatch_logging: true
""".strip(),
        encoding="utf-8",
    )

    cfg = load_config(str(config_path))

    assert cfg.paths["training_data"] == str(tmp_path / "data" / "train.txt")
    assert cfg.paths["model"] == "/abs/model.json"
    assert cfg.paths["viterbi_log"] == str(tmp_path / "viterbi.log")
    assert cfg.read_model_in is True
    assert cfg.iterations == 12
    assert cfg.cutoff == 2
    assert cfg.decode_scope == "sentence"
    assert cfg.log_space is True
    assert cfg.enable_mismatch_logging is True


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("", encoding="utf-8")

    cfg = load_config(str(config_path))

    assert cfg.read_model_in is False
    assert cfg.iterations == 100
    assert cfg.cutoff == 4
    assert cfg.decode_scope == "corpus"
    assert set(cfg.paths) == set(DEFAULT_PATHS)


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_load_config_rejects_non_dict_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- not a mapping", encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(str(config_path))


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("paths: [unclosed", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(config_path))


def test_load_config_rejects_unknown_scope(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("decoding:\n  scope: paragraph\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(config_path))


def test_default_config_uses_stock_file_names(tmp_path: Path) -> None:
    cfg = default_config(tmp_path)

    assert isinstance(cfg, Config)
    assert cfg.paths["test_data"] == str(tmp_path / "test.data")
    assert cfg.paths["best_outcome_log"] == str(tmp_path / "bestoutcome.log")


@pytest.mark.parametrize(
    "text",
    [
        "paths: data\n",
        "training: 5\n",
        "decoding:\n  - corpus\n",
    ],
)
def test_load_config_rejects_non_dict_sections(tmp_path: Path, text: str) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(str(config_path))
