import logging

import pytest

from manuscript_engine import analyze
from manuscript_engine.analyzers import DimensionAnalyzer, ReadabilityAnalyzer
from manuscript_engine.clusters import ClusterTable, KeywordCluster
from manuscript_engine.config import EngineConfig
from manuscript_engine.errors import AnalyzerFailure, InputDecodingError
from manuscript_engine.recommendations import NEAR_ABSENCE
from manuscript_engine.scoring import presence_level
from tests.utils import SAMPLE_STORY, uniform_text


class ExplodingAnalyzer(DimensionAnalyzer):
    name = "Exploding"

    def analyze(self, context):
        raise ZeroDivisionError("boom")


def test_analyze_is_deterministic():
    first = analyze(SAMPLE_STORY)
    second = analyze(SAMPLE_STORY)

    assert first.to_dict() == second.to_dict()


def test_parallel_and_sequential_runs_agree():
    sequential = analyze(SAMPLE_STORY, config=EngineConfig(max_workers=1))
    parallel = analyze(SAMPLE_STORY, config=EngineConfig(max_workers=8))

    assert sequential.to_dict() == parallel.to_dict()


def test_scores_are_bounded_and_presence_matches():
    report = analyze(SAMPLE_STORY)

    assert len(report.dimension_scores) == 7
    for score in report.dimension_scores:
        assert 0 <= score.score <= 100
        assert score.presence == presence_level(score.score)
        for component in score.components:
            assert 0 <= component.score <= 100
    assert 0 <= report.overall_score <= 100
    assert 0 <= report.balance_score <= 100
    assert len(report.recommendations) <= 5


@pytest.mark.parametrize("text", ["", " "])
def test_degenerate_input_yields_floor_scores(text: str):
    report = analyze(text)

    assert len(report.dimension_scores) == 7
    assert all(score.score == 0 for score in report.dimension_scores)
    assert all(score.details for score in report.dimension_scores)
    assert report.overall_score == 0
    assert report.balance_score == 100


def test_uniform_document_without_matches():
    text = uniform_text(paragraphs=100, words_per_paragraph=100)
    report = analyze(text)

    assert all(score.presence == "absent" for score in report.dimension_scores)
    assert report.balance_score >= 85
    assert report.recommendations[0] == NEAR_ABSENCE


def test_window_size_override_changes_windows():
    text = " ".join(["ran"] * 30)
    report = analyze(text, window_size=10)

    assert report.dimension("Scene/Sequel Balance").metrics["scene_count"] == 3


def test_unknown_genre_uses_general_profile(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        unknown = analyze(SAMPLE_STORY, genre="space opera")
    general = analyze(SAMPLE_STORY, genre="general")

    assert "space opera" in caplog.text
    assert unknown.to_dict() == general.to_dict()


def test_analyzer_failure_is_reported_with_cause():
    with pytest.raises(AnalyzerFailure) as excinfo:
        analyze(
            SAMPLE_STORY,
            analyzers=[ReadabilityAnalyzer(), ExplodingAnalyzer()],
            config=EngineConfig(max_workers=2),
        )

    assert excinfo.value.analyzer == "Exploding"
    assert isinstance(excinfo.value.cause, ZeroDivisionError)
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_bytes_input_is_decoded():
    assert analyze(SAMPLE_STORY.encode("utf-8")).to_dict() == analyze(SAMPLE_STORY).to_dict()
    with pytest.raises(InputDecodingError):
        analyze(b"\xff\xfe\xfa")


def test_custom_cluster_table_is_used():
    table = ClusterTable([KeywordCluster(name="Seafaring", group="theme", keywords=("ship",))])

    report = analyze("The ship sailed. The ship returned home.", clusters=table)

    themes = report.dimension("Theme & Symbol")
    assert themes.metrics["theme_count"] == 1
    assert themes.details[0].startswith("Seafaring")


def test_dimension_weights_shape_overall_score():
    weights = {"Readability": 4.0, "Sensory Balance": 0.5}
    report = analyze(SAMPLE_STORY, config=EngineConfig(dimension_weights=weights))

    total = sum(weights.get(score.name, 1.0) for score in report.dimension_scores)
    expected = sum(
        score.score * weights.get(score.name, 1.0) for score in report.dimension_scores
    )
    assert report.overall_score == round(expected / total, 2)


def test_report_to_dict_shape():
    payload = analyze(SAMPLE_STORY).to_dict()

    assert payload["variant"] == "full"
    assert set(payload) == {
        "variant",
        "overall_score",
        "balance_score",
        "strengths",
        "weaknesses",
        "recommendations",
        "dimensions",
    }
    fiction = payload["dimensions"][0]
    assert fiction["dimension"] == "Fiction Elements"
    assert len(fiction["components"]) == 12
    assert fiction["balance"] is None
    balances = {d["dimension"]: d["balance"] for d in payload["dimensions"]}
    assert balances["Dialogue/Narrative Ratio"] in {"excellent", "good", "needs-adjustment"}
    assert balances["Scene/Sequel Balance"] in {"excellent", "good", "unbalanced"}
    assert balances["Sensory Balance"] in {
        "excellent",
        "good",
        "visual-heavy",
        "needs-variety",
    }
