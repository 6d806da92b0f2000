import logging
from pathlib import Path

import pytest

from manuscript_engine.clusters import (
    ClusterTable,
    KeywordCluster,
    cluster_table_from_dict,
    default_cluster_table,
    load_cluster_table,
)


def test_default_table_has_expected_groups():
    table = default_cluster_table()

    assert len(table.group("theme")) == 12
    assert len(table.group("symbol")) == 10
    assert {cluster.name for cluster in table.group("sense")} == {
        "sight",
        "sound",
        "touch",
        "smell",
        "taste",
    }
    assert "Love & Connection" in table
    assert table.get("touch").stem is True
    assert table.get("Love & Connection").stem is False


def test_default_table_is_built_once():
    assert default_cluster_table() is default_cluster_table()


def test_keywords_are_normalized_and_deduplicated():
    table = ClusterTable([])
    updated = table.with_overrides({"theme": {"Custom": ["  Sea ", "SEA", "open   sea"]}})

    assert updated.get("Custom").keywords == ("sea", "open sea")


def test_override_replaces_keywords_without_mutating_default():
    default = default_cluster_table()
    updated = default.with_overrides({"theme": {"Love & Connection": ["adore"]}})

    assert updated.get("Love & Connection").keywords == ("adore",)
    assert "love" in default.get("Love & Connection").keywords


def test_empty_override_keeps_default_and_warns(caplog: pytest.LogCaptureFixture):
    default = default_cluster_table()
    with caplog.at_level(logging.WARNING, logger="manuscript_engine.clusters"):
        updated = default.with_overrides({"theme": {"Love & Connection": []}})

    assert updated.get("Love & Connection") == default.get("Love & Connection")
    assert "empty" in caplog.text


def test_override_into_wrong_group_raises():
    with pytest.raises(ValueError):
        default_cluster_table().with_overrides({"symbol": {"Love & Connection": ["x"]}})


def test_duplicate_cluster_names_are_rejected():
    cluster = KeywordCluster(name="dup", group="theme", keywords=("a",))
    with pytest.raises(ValueError):
        ClusterTable([cluster, cluster])


def test_cluster_table_from_dict_without_data_returns_default():
    assert cluster_table_from_dict(None) is default_cluster_table()


def test_load_cluster_table_from_yaml(tmp_path: Path):
    path = tmp_path / "clusters.yaml"
    path.write_text("theme:\n  Seafaring:\n    - ship\n    - harbor\n", encoding="utf-8")

    table = load_cluster_table(path)

    assert table.get("Seafaring").group == "theme"
    assert len(table.group("theme")) == 13


def test_load_cluster_table_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "clusters.yaml"
    path.write_text("- ship\n- harbor\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_cluster_table(path)
