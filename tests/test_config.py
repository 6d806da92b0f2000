import logging
from pathlib import Path

import pytest

from manuscript_engine.config import EngineConfig, config_from_dict, config_from_yaml, load_config


def test_defaults():
    config = EngineConfig()

    assert config.window_size == 1000
    assert config.genre == "general"
    assert config.tie_label == "sequel"
    assert config.action_word_span == 10
    assert config.recommendation_cap == 5


def test_config_from_dict_ignores_unknown_keys(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="manuscript_engine.config"):
        config = config_from_dict({"window_size": 250, "genre": "romance", "colour": "blue"})

    assert "colour" in caplog.text

    assert config.window_size == 250
    assert config.genre == "romance"


def test_invalid_sizes_are_clamped():
    config = EngineConfig(window_size=0, max_workers=-3)

    assert config.window_size == 1
    assert config.max_workers == 1


def test_dimension_weights_must_be_a_mapping():
    with pytest.raises(ValueError):
        config_from_dict({"dimension_weights": ["Readability"]})
    config = config_from_dict({"dimension_weights": {"Readability": "2"}})
    assert config.dimension_weights == {"Readability": 2.0}


def test_config_from_yaml(tmp_path: Path):
    path = tmp_path / "engine.yaml"
    path.write_text("window_size: 500\nmax_workers: 1\n", encoding="utf-8")

    config = config_from_yaml(path)

    assert config.window_size == 500
    assert config.max_workers == 1
    assert load_config(None) == EngineConfig()


def test_config_from_yaml_rejects_lists(tmp_path: Path):
    path = tmp_path / "engine.yaml"
    path.write_text("- window_size\n", encoding="utf-8")

    with pytest.raises(ValueError):
        config_from_yaml(path)


def test_to_dict_round_trips():
    config = EngineConfig(genre="thriller", dimension_weights={"Readability": 2.0})

    assert config_from_dict(config.to_dict()) == config


def test_overrides_replace_file_values_and_skip_none(tmp_path: Path):
    path = tmp_path / "engine.yaml"
    path.write_text("window_size: 500\ngenre: romance\n", encoding="utf-8")

    config = load_config(path, genre="thriller", window_size=None, max_workers=0)

    assert config.genre == "thriller"
    assert config.window_size == 500
    assert config.max_workers == 1
    assert load_config(None, genre="horror").genre == "horror"


def test_relative_clusters_path_resolves_next_to_config(tmp_path: Path):
    config_dir = tmp_path / "settings"
    config_dir.mkdir()
    path = config_dir / "engine.yaml"
    path.write_text("clusters_path: keywords.yaml\n", encoding="utf-8")

    config = config_from_yaml(path)

    assert Path(config.clusters_path) == config_dir / "keywords.yaml"
