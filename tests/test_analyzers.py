import logging

import pytest

from manuscript_engine.analyzers import (
    ConflictAnalyzer,
    DialogueRatioAnalyzer,
    FictionElementsAnalyzer,
    ReadabilityAnalyzer,
    SceneSequelAnalyzer,
    SensoryBalanceAnalyzer,
    SpacingAnalyzer,
    ThemeSymbolAnalyzer,
    create_analyzer,
    default_analyzers,
)
from manuscript_engine.analyzers.conflict import find_conflicts, low_conflict_sections
from manuscript_engine.analyzers.dialogue import dialogue_word_count, resolve_genre
from manuscript_engine.analyzers.dialogue import balance_label as dialogue_balance
from manuscript_engine.analyzers.fiction_elements import EMOTIONAL_CORE, genre
from manuscript_engine.analyzers.readability import compute_metrics, count_syllables, reading_level
from manuscript_engine.analyzers.scene_sequel import balance_label as scene_balance
from manuscript_engine.analyzers.sensory import balance_label as sensory_balance
from manuscript_engine.analyzers.spacing import spacing_tone
from manuscript_engine.analyzers.themes import NO_THEMES, distribution_for, intensity_for
from manuscript_engine.tokenization import build_document
from tests.utils import SAMPLE_SENTENCE, SAMPLE_STORY, context_for, uniform_text


def test_create_analyzer_by_name():
    assert isinstance(create_analyzer("readability"), ReadabilityAnalyzer)
    assert isinstance(create_analyzer(" Theme & Symbol "), ThemeSymbolAnalyzer)
    with pytest.raises(ValueError):
        create_analyzer("plot twists")


def test_default_analyzers_report_order():
    assert [analyzer.name for analyzer in default_analyzers()] == [
        "Fiction Elements",
        "Theme & Symbol",
        "Dialogue/Narrative Ratio",
        "Scene/Sequel Balance",
        "Conflict Tracking",
        "Sensory Balance",
        "Readability",
    ]


def test_fiction_elements_on_uniform_text():
    score = FictionElementsAnalyzer().analyze(context_for(uniform_text()))

    assert len(score.components) == 12
    assert score.score == 15.0
    core = next(c for c in score.components if c.name == EMOTIONAL_CORE)
    assert core.score == 0.0
    assert score.metrics["Structure"] == 60.0


def test_fiction_elements_empty_input():
    score = FictionElementsAnalyzer().analyze(context_for(""))

    assert score.score == 0.0
    assert score.details


def test_genre_component_detects_dominant_markers():
    text = "magic dragon wizard spell sword kingdom quest magic."
    context = context_for(text)

    component = genre(context.document, context.index)

    assert component.score == 60.0
    assert "Strong Fantasy elements" in component.details


def test_theme_intensity_breakpoints():
    assert intensity_for(600) == 40
    assert intensity_for(400) == 60
    assert intensity_for(200) == 80
    assert intensity_for(150) == 100


def test_theme_distribution():
    assert distribution_for([], 300) == "scattered"
    assert distribution_for([0, 1], 300) == "scattered"
    assert distribution_for([0, 1, 2], 300) == "concentrated"
    assert distribution_for([10, 110, 210], 300) == "balanced"


def test_theme_analyzer_on_story():
    score = ThemeSymbolAnalyzer().analyze(context_for(SAMPLE_STORY))

    assert score.metrics["theme_count"] > 0
    assert score.metrics["total_mentions"] > 0
    assert any(detail.startswith("Love & Connection") for detail in score.details)


def test_theme_analyzer_without_themes():
    score = ThemeSymbolAnalyzer().analyze(context_for(uniform_text(2, 50)))

    assert score.score == 0.0
    assert score.insights[0] == NO_THEMES


def test_theme_density_is_monotonic():
    previous = -1.0
    for hits in range(0, 40, 5):
        text = " ".join(["hope"] * hits + ["zzq"] * (200 - hits))
        score = ThemeSymbolAnalyzer().analyze(context_for(text)).score
        assert score >= previous
        previous = score


def test_theme_score_is_raw_density():
    text = " ".join(["hope"] * 10 + ["zzq"] * 190)
    score = ThemeSymbolAnalyzer().analyze(context_for(text))

    assert score.metrics["thematic_density"] == 5
    assert score.score == 5.0


def test_resolve_genre_falls_back(caplog: pytest.LogCaptureFixture):
    assert resolve_genre("Thriller") == "thriller"
    with caplog.at_level(logging.WARNING, logger="manuscript_engine.analyzers.dialogue"):
        assert resolve_genre("space opera") == "general"
    assert "space opera" in caplog.text


def test_dialogue_word_count_handles_curly_quotes():
    text = '"I love you," she said. “Come home now.”'

    assert dialogue_word_count(text) == 6


def test_dialogue_ratio_against_general_target():
    score = DialogueRatioAnalyzer().analyze(context_for('"Run now" he said.'))

    assert score.score == 40.0
    assert score.metrics["dialogue_words"] == 2
    assert score.metrics["action_words"] == 0
    assert score.insights == ("Increase action - add more movement and tension",)
    assert score.balance == "needs-adjustment"


def test_dialogue_balance_labels():
    assert dialogue_balance(10) == "excellent"
    assert dialogue_balance(30) == "good"
    assert dialogue_balance(41) == "needs-adjustment"


def test_scene_sequel_example_sentence():
    context = context_for(SAMPLE_SENTENCE)

    assert len(context.windows) == 1
    assert context.windows[0].label == "scene"
    score = SceneSequelAnalyzer().analyze(context)
    assert score.metrics["scene_count"] == 1
    assert score.score == 75.0
    assert score.balance == "good"


def test_scene_sequel_without_indicators():
    score = SceneSequelAnalyzer().analyze(context_for(uniform_text(3, 10)))

    assert score.score == 0.0
    assert score.details


def test_scene_sequel_balance_labels():
    assert scene_balance(2) == "excellent"
    assert scene_balance(1.2) == "good"
    assert scene_balance(4) == "good"
    assert scene_balance(0.5) == "unbalanced"
    assert scene_balance(6) == "unbalanced"


def test_find_conflicts_per_sentence():
    context = context_for("The enemy attacked. She felt doubt and fear. They argued until peace.")

    conflicts = find_conflicts(context.document, context.index)

    by_type = {}
    for conflict in conflicts:
        by_type.setdefault(conflict.type, []).append(conflict)
    assert len(by_type["external"]) == 2
    assert by_type["external"][0].intensity == 70
    assert len(by_type["internal"]) == 2
    assert by_type["interpersonal"][0].intensity == 55
    assert by_type["interpersonal"][0].resolved is True
    assert by_type["external"][0].resolved is False


def test_low_conflict_sections_use_character_chunks():
    assert low_conflict_sections([], 5000, 2000) == [0, 2000, 4000]


def test_conflict_score_is_monotonic():
    filler = " ".join(["Morning came slowly over the field."] * 2000)
    previous = -1.0
    for count in range(5):
        text = filler + " " + " ".join(["The enemy attacked."] * count)
        score = ConflictAnalyzer().analyze(context_for(text)).score
        assert 0 <= score <= 100
        assert score >= previous
        previous = score
    assert previous > 0


def test_conflict_score_does_not_drop_for_a_weaker_extra_hit():
    filler = " ".join(["Morning came slowly over the field."] * 2000)
    dense = "Doubt and fear and guilt and shame held him."
    before = filler + " " + dense + " The calm day went on."
    after = filler + " " + dense + " The calm fear went on."

    first = ConflictAnalyzer().analyze(context_for(before))
    second = ConflictAnalyzer().analyze(context_for(after))

    assert second.metrics["total_conflicts"] == first.metrics["total_conflicts"] + 1
    assert second.metrics["average_intensity"] < first.metrics["average_intensity"]
    assert second.metrics["peak_intensity"] == 100
    assert second.score >= first.score


def test_sensory_example_sentence():
    score = SensoryBalanceAnalyzer().analyze(context_for(SAMPLE_SENTENCE))

    assert score.metrics["touch_count"] >= 1
    assert score.metrics["sound_count"] >= 1
    assert score.balance == "needs-variety"


def test_sensory_balance_labels():
    assert sensory_balance(
        {"sight": 80, "sound": 5, "touch": 5, "smell": 5, "taste": 5}
    ) == "visual-heavy"
    assert sensory_balance(
        {"sight": 50, "sound": 20, "touch": 20, "smell": 2, "taste": 8}
    ) == "needs-variety"
    assert sensory_balance(
        {"sight": 62, "sound": 9.5, "touch": 9.5, "smell": 9.5, "taste": 9.5}
    ) == "good"
    assert sensory_balance(
        {"sight": 20, "sound": 20, "touch": 20, "smell": 20, "taste": 20}
    ) == "excellent"


def test_count_syllables_heuristic():
    assert count_syllables("cat") == 1
    assert count_syllables("table") == 2
    assert count_syllables("jumped") == 1


def test_reading_level_bands():
    assert reading_level(95) == "5th Grade"
    assert reading_level(65) == "8th-9th Grade"
    assert reading_level(10) == "College Graduate"


def test_readability_metrics_for_simple_sentence():
    context = context_for("The cat sat on the mat.")

    score = ReadabilityAnalyzer().analyze(context)

    assert score.metrics["flesch_kincaid_grade"] == pytest.approx(-1.45, abs=0.1)
    assert score.score == pytest.approx(52.75)
    assert score.metrics["reading_minutes"] == 1


def test_readability_degenerate_input():
    assert compute_metrics(build_document("...")) is None
    assert ReadabilityAnalyzer().analyze(context_for("")).score == 0.0


def test_spacing_tone_boundaries():
    assert spacing_tone(59) == "compact"
    assert spacing_tone(60) == "balanced"
    assert spacing_tone(160) == "balanced"
    assert spacing_tone(161) == "extended"


def test_spacing_score_penalizes_uneven_paragraphs():
    text = "\n\n".join(
        [" ".join(["word"] * 100), " ".join(["word"] * 30), " ".join(["word"] * 200)]
    )

    score = SpacingAnalyzer().analyze(context_for(text))

    assert score.score == 76.0
    assert score.metrics["compact"] == 1
    assert score.metrics["extended"] == 1
    assert "Paragraphs 3 exceed" in score.insights[0]
    assert "Paragraphs 2 fall below" in score.insights[1]
