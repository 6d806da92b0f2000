from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Sequence

from ..matching import OccurrenceIndex
from ..models import DimensionScore, Document, MatchOccurrence
from ..scoring import dimension_score
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Theme & Symbol"

Distribution = Literal["concentrated", "scattered", "balanced"]

MAX_EXAMPLES = 3
PRIMARY_THEMES = 5
SECONDARY_THEMES = 5
MIN_SYMBOL_OCCURRENCES = 3
MAX_SYMBOLS = 5
MAX_FOCUSED_THEMES = 5

SYMBOL_MEANINGS = {
    "Light/Dark": "Often represents hope vs. despair, knowledge vs. ignorance, or good vs. evil",
    "Water": "May symbolize emotions, cleansing, life/death, or the unconscious",
    "Fire": "Could represent destruction, passion, transformation, or purification",
    "Nature": "Often symbolizes growth, life cycles, or connection to something larger",
    "Birds": "May represent freedom, transcendence, perspective, or the soul",
    "Barriers": "Could symbolize obstacles, boundaries, transitions, or protection vs. confinement",
    "Paths": "Often represents choices, life journey, or destiny",
    "Mirrors": "May symbolize self-reflection, truth, identity, or duality",
    "Blood": "Could represent life force, sacrifice, violence, or family bonds",
    "Time": "Often symbolizes mortality, pressure, or the inevitability of change",
}
DEFAULT_MEANING = "Symbolic significance may vary based on context"

NO_THEMES = (
    "No clear themes detected. Consider adding deeper thematic layers to strengthen "
    "your narrative."
)
TOO_MANY_THEMES = (
    "Many themes detected. Consider focusing on 2-3 core themes for stronger impact."
)
NO_SYMBOLS = (
    "No recurring symbolic patterns detected. Consider using recurring imagery to "
    "reinforce themes."
)
LOW_DENSITY = (
    "Low thematic density. Add more thematic depth to give readers something to "
    "contemplate."
)
HIGH_DENSITY = (
    "Very high thematic density. Ensure themes enhance rather than overwhelm the story."
)


@dataclass(slots=True)
class ThematicConcept:
    theme: str
    frequency: int
    intensity: int
    distribution: Distribution
    examples: List[str] = field(default_factory=list)


@dataclass(slots=True)
class SymbolicPattern:
    symbol: str
    occurrences: int
    possible_meaning: str
    contexts: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ThemeAnalysis:
    """Detected themes and symbols for one document."""

    primary_themes: List[ThematicConcept]
    secondary_themes: List[ThematicConcept]
    symbolic_patterns: List[SymbolicPattern]
    theme_count: int
    total_mentions: int
    thematic_density: int

    @property
    def dominant_theme(self) -> str | None:
        return self.primary_themes[0].theme if self.primary_themes else None


def intensity_for(words_per_occurrence: float) -> int:
    """Finer density means higher intensity."""
    if words_per_occurrence > 500:
        return 40
    if words_per_occurrence > 300:
        return 60
    if words_per_occurrence > 150:
        return 80
    return 100


def distribution_for(positions: Sequence[int], text_length: int) -> Distribution:
    """
    Compare the busiest and quietest thirds of the text.

    Fewer than three positions is always ``scattered``.
    """
    if len(positions) < 3:
        return "scattered"
    third = text_length / 3
    early = sum(1 for p in positions if p < third)
    middle = sum(1 for p in positions if third <= p < third * 2)
    late = sum(1 for p in positions if p >= third * 2)
    spread = max(early, middle, late) - min(early, middle, late)
    if spread > len(positions) * 0.5:
        return "concentrated"
    if spread < len(positions) * 0.2:
        return "balanced"
    return "scattered"


def example_sentences(
    document: Document, hits: Sequence[MatchOccurrence], limit: int = MAX_EXAMPLES
) -> List[str]:
    """Up to ``limit`` sentences, in document order, that contain a hit."""
    offsets = sorted({hit.char_offset for hit in hits})
    examples: List[str] = []
    cursor = 0
    for sentence in document.sentences:
        while cursor < len(offsets) and offsets[cursor] < sentence.start_char:
            cursor += 1
        if cursor < len(offsets) and offsets[cursor] < sentence.end_char:
            examples.append(sentence.text)
            if len(examples) >= limit:
                break
    return examples


def analyze_themes(document: Document, index: OccurrenceIndex) -> ThemeAnalysis:
    word_count = max(1, document.word_count)
    concepts: List[ThematicConcept] = []
    for cluster in index.table.group("theme"):
        hits = index.occurrences(cluster.name)
        if not hits:
            continue
        positions = [hit.char_offset for hit in hits]
        concepts.append(
            ThematicConcept(
                theme=cluster.name,
                frequency=len(hits),
                intensity=intensity_for(word_count / len(hits)),
                distribution=distribution_for(positions, len(document.text)),
                examples=example_sentences(document, hits),
            )
        )
    concepts.sort(key=lambda concept: -concept.frequency)

    symbols: List[SymbolicPattern] = []
    for cluster in index.table.group("symbol"):
        hits = index.occurrences(cluster.name)
        if len(hits) < MIN_SYMBOL_OCCURRENCES:
            continue
        symbols.append(
            SymbolicPattern(
                symbol=cluster.name,
                occurrences=len(hits),
                possible_meaning=SYMBOL_MEANINGS.get(cluster.name, DEFAULT_MEANING),
                contexts=example_sentences(document, hits),
            )
        )
    symbols.sort(key=lambda symbol: -symbol.occurrences)

    mentions = sum(concept.frequency for concept in concepts)
    density = min(100, round(mentions / word_count * 100)) if document.word_count else 0
    return ThemeAnalysis(
        primary_themes=concepts[:PRIMARY_THEMES],
        secondary_themes=concepts[PRIMARY_THEMES : PRIMARY_THEMES + SECONDARY_THEMES],
        symbolic_patterns=symbols[:MAX_SYMBOLS],
        theme_count=len(concepts),
        total_mentions=mentions,
        thematic_density=density,
    )


def theme_recommendations(analysis: ThemeAnalysis) -> List[str]:
    recommendations: List[str] = []
    if not analysis.primary_themes:
        recommendations.append(NO_THEMES)
    if analysis.theme_count > MAX_FOCUSED_THEMES:
        recommendations.append(TOO_MANY_THEMES)
    concentrated = [t for t in analysis.primary_themes if t.distribution == "concentrated"]
    if concentrated:
        recommendations.append(
            f'Theme "{concentrated[0].theme}" is concentrated in one section. '
            "Consider distributing it more evenly."
        )
    if not analysis.symbolic_patterns:
        recommendations.append(NO_SYMBOLS)
    if analysis.thematic_density < 30:
        recommendations.append(LOW_DENSITY)
    if analysis.thematic_density > 80:
        recommendations.append(HIGH_DENSITY)
    weak = [t for t in analysis.primary_themes if t.intensity < 50]
    if weak:
        recommendations.append(
            f'Theme "{weak[0].theme}" is present but weak. Develop it further or remove it.'
        )
    return recommendations


class ThemeSymbolAnalyzer(DimensionAnalyzer):
    """
    Score thematic density: theme keyword mentions per 100 words, capped at 100.

    The score is the raw density, not a rescaled grade, so ordinary prose
    lands around 2-10 and only keyword-saturated passages approach 100.
    """

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        document = context.document
        if document.is_empty:
            return dimension_score(
                NAME,
                0,
                details=["No words to analyze for themes."],
                insights=[NO_THEMES],
                metrics={
                    "theme_count": 0,
                    "total_mentions": 0,
                    "thematic_density": 0,
                    "symbol_count": 0,
                },
            )
        analysis = analyze_themes(document, context.index)
        details = [
            f"{concept.theme}: {concept.frequency} mention(s), intensity "
            f"{concept.intensity}, {concept.distribution}"
            for concept in analysis.primary_themes
        ]
        if analysis.secondary_themes:
            details.append(
                "Secondary themes: "
                + ", ".join(concept.theme for concept in analysis.secondary_themes)
            )
        details.extend(
            f"Symbol {symbol.symbol} ({symbol.occurrences}x): {symbol.possible_meaning}"
            for symbol in analysis.symbolic_patterns
        )
        return dimension_score(
            NAME,
            analysis.thematic_density,
            details=details,
            insights=theme_recommendations(analysis),
            metrics={
                "theme_count": analysis.theme_count,
                "total_mentions": analysis.total_mentions,
                "thematic_density": analysis.thematic_density,
                "symbol_count": len(analysis.symbolic_patterns),
            },
        )
