from manuscript_engine import analyze_tier
from manuscript_engine.analyzers.dual_coding import (
    DualCodingAnalyzer,
    VisualSuggestion,
    analyze_paragraph,
    deduplicate,
    has_nearby_visual,
)
from manuscript_engine.clusters import default_cluster_table
from tests.utils import context_for, uniform_text

SPATIAL = (
    "The valve sits above the pump and below the tank, adjacent to the left corner "
    "of the frame structure."
)


def test_tier_report_for_evenly_chunked_text():
    report = analyze_tier(uniform_text(paragraphs=5, words_per_paragraph=100))

    assert report.variant == "tier"
    assert [score.name for score in report.dimension_scores] == [
        "Spacing & Chunking",
        "Dual Coding",
    ]
    assert report.dimension("Spacing & Chunking").score == 98.0
    assert report.dimension("Dual Coding").score == 90.0
    assert report.overall_score == 94.0
    assert report.balance_score == 92.0
    assert report.strengths == ("Spacing & Chunking", "Dual Coding")
    assert report.weaknesses == ()
    assert report.recommendations == ()


def test_tier_empty_input():
    report = analyze_tier("")

    assert all(score.score == 0 for score in report.dimension_scores)
    assert report.weaknesses == ("Spacing & Chunking", "Dual Coding")


def test_spatial_paragraph_gets_high_priority_diagram():
    suggestions = analyze_paragraph(SPATIAL, 0, default_cluster_table())

    assert len(suggestions) == 1
    assert suggestions[0].visual_type == "diagram"
    assert suggestions[0].priority == "high"
    assert suggestions[0].message.startswith("Diagram needed")


def test_short_paragraphs_are_skipped():
    assert analyze_paragraph("above below left right", 0, default_cluster_table()) == []


def test_deduplicate_keeps_highest_priority_per_position():
    medium = VisualSuggestion(10, "x", "a", "graph", "medium")
    high = VisualSuggestion(10, "x", "b", "diagram", "high")
    other = VisualSuggestion(2, "y", "c", "flowchart", "medium")

    assert deduplicate([medium, other, high]) == [high, other]


def test_nearby_figure_reference_suppresses_suggestion():
    source = "See Figure 2 for details. " + SPATIAL

    assert has_nearby_visual(source, 30)
    assert not has_nearby_visual(SPATIAL, 0)


def test_markup_blocks_drive_dual_coding():
    markup = f"<h1>Pumps</h1><p>{SPATIAL}</p>"

    report = analyze_tier(None, markup=markup)

    dual = report.dimension("Dual Coding")
    assert dual.score == 82.0
    assert dual.metrics["high_priority"] == 1
    assert "position" in dual.details[0]


def test_markup_with_figure_reference_has_no_suggestions():
    markup = f"<p>Figure 1 shows the pump.</p><p>{SPATIAL}</p>"

    report = analyze_tier(None, markup=markup)

    assert report.dimension("Dual Coding").score == 90.0


def test_dual_coding_falls_back_to_plain_paragraphs():
    score = DualCodingAnalyzer().analyze(context_for(SPATIAL + "\n\nShort line."))

    assert score.metrics["suggestions"] == 1


def test_markup_passed_as_text_is_detected():
    markup = f"<p>{SPATIAL}</p>"

    assert analyze_tier(markup).to_dict() == analyze_tier(None, markup=markup).to_dict()
