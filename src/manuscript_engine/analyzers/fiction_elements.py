from __future__ import annotations

import re
from statistics import mean, pstdev
from typing import Callable, List

from ..matching import OccurrenceIndex
from ..models import DimensionScore, Document
from ..scoring import dimension_score
from ..textutils import recurring_capitalized_words
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Fiction Elements"
EMOTIONAL_CORE = "Emotional Core"

DIALOGUE_MARK_RE = re.compile(r"[\"'“”]")
SCENE_BREAK_RE = re.compile(r"\n\n\n+")
CAPITALIZED_RE = re.compile(r"[A-Z][a-z]+")
LONG_WORD_MIN = 6


class _Element:
    """Accumulates capped contributions for one fiction element."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.score = 0.0
        self.details: List[str] = []
        self.insights: List[str] = []

    def add(self, points: float, cap: float | None = None) -> None:
        self.score += min(cap, points) if cap is not None else points

    def build(self) -> DimensionScore:
        return dimension_score(
            self.name, min(100.0, self.score), details=self.details, insights=self.insights
        )


def _dialogue_marks(text: str) -> float:
    return len(DIALOGUE_MARK_RE.findall(text)) / 2


def _sentence_lengths(document: Document) -> List[int]:
    return [sentence.word_count for sentence in document.sentences]


def characters(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Characters")
    element.add(index.count("characters.indicators") * 2, cap=30)
    if index.count("characters.arc") > 3:
        element.add(20)
        element.insights.append("Character development language detected")
    dialogue = _dialogue_marks(document.text)
    if dialogue > 10:
        element.add(15)
        element.details.append(f"~{int(dialogue)} dialogue exchanges")
    names = recurring_capitalized_words(document.word_texts())
    if len(names) > 2:
        element.add(20)
        element.details.append(f"{len(names)} recurring character names")
    elif names:
        element.add(10)
        element.details.append(f"{len(names)} character name(s)")
    element.add(index.count("characters.actions"), cap=15)
    if element.score < 40:
        element.insights.append("Consider deepening character presence and actions")
    if dialogue < 5:
        element.insights.append("More dialogue could enhance character voice")
    return element.build()


def setting(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Setting")
    locations = index.count("setting.locations")
    element.add(locations * 3, cap=30)
    if locations > 5:
        element.details.append("Multiple location references")
    sensory = index.count("setting.sensory")
    element.add(sensory * 4, cap=40)
    if sensory > 8:
        element.details.append("Rich sensory details")
        element.insights.append("Strong immersive setting")
    if index.count("setting.weather") > 2:
        element.add(15)
        element.details.append("Environmental atmosphere present")
    element.add(index.count("setting.placement") * 5, cap=15)
    if element.score < 40:
        element.insights.append("Setting could be more vivid; add sensory details")
    if sensory < 3:
        element.insights.append("Consider incorporating more sensory descriptions")
    return element.build()


def time(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Time")
    markers = index.count("time.markers")
    element.add(markers * 3, cap=35)
    if markers > 5:
        element.details.append("Clear temporal markers")
    transitions = index.count("time.transitions")
    element.add(transitions * 8, cap=25)
    if transitions > 2:
        element.details.append("Time transitions present")
        element.insights.append("Good temporal flow")
    past = index.count("past tense")
    present = index.count("present tense")
    dominant = "past" if past > present else "present"
    minority_ratio = min(past, present) / max(past, present, 1)
    if minority_ratio > 0.3 and document.sentence_count > 10:
        element.insights.append("Mixed tenses detected; verify this is intentional")
    else:
        element.add(20)
        element.details.append(f"Consistent {dominant} tense")
    if index.count("time.span") > 0:
        element.add(10)
        element.details.append("Long time span indicated")
    if element.score < 40:
        element.insights.append("Add more temporal context to ground readers")
    return element.build()


def plot(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Plot")
    inciting = index.count("plot.inciting")
    if inciting > 0:
        element.add(20)
        element.details.append("Inciting events present")
    tension = index.count("plot.tension")
    element.add(tension * 3, cap=30)
    if tension > 5:
        element.insights.append("Good use of complication and contrast")
    if index.count("plot.climax") > 0:
        element.add(25)
        element.details.append("Climactic moments detected")
    if index.count("plot.resolution") > 0:
        element.add(15)
        element.details.append("Resolution elements present")
    element.add(index.count("plot.actions") * 2, cap=10)
    if element.score < 40:
        element.insights.append("Plot structure could be more defined")
    if inciting == 0:
        element.insights.append("Consider a stronger inciting incident")
    return element.build()


def conflict(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Conflict")
    external = index.count("conflict.external")
    element.add(external * 4, cap=40)
    if external > 5:
        element.details.append("Strong external conflict")
        element.insights.append("Clear antagonistic forces")
    emotional = index.count("conflict.emotional")
    element.add(emotional * 5, cap=30)
    if emotional > 3:
        element.details.append("Internal conflict present")
        element.insights.append("Good psychological depth")
    if index.count("conflict.tension") > 2:
        element.add(20)
        element.details.append("Tension explicitly developed")
    if document.text.count("?") + document.text.count("!") > 5:
        element.add(10)
        element.details.append("Dramatic dialogue present")
    if element.score < 40:
        element.insights.append(
            "Conflict could be more pronounced; what opposes the protagonist?"
        )
    if emotional == 0 and external == 0:
        element.insights.append("Consider adding both internal and external conflict")
    return element.build()


def theme(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Theme")
    element.add(index.count("theme.words") * 4, cap=50)
    detected = index.distinct_keywords("theme.words")
    if detected:
        element.details.append(f"Themes: {', '.join(detected[:3])}")
        if len(detected) > 3:
            element.insights.append("Multiple thematic threads detected")
    if index.count("theme.symbolic") > 0:
        element.add(25)
        element.details.append("Symbolic language present")
    frequency: dict[str, int] = {}
    for word in document.word_texts():
        lowered = word.lower()
        if len(lowered) >= LONG_WORD_MIN:
            frequency[lowered] = frequency.get(lowered, 0) + 1
    if sum(1 for count in frequency.values() if count > 3) > 2:
        element.add(25)
        element.insights.append("Recurring concepts suggest thematic depth")
    if element.score < 40:
        element.insights.append(
            "Theme could be more developed through recurring symbols or ideas"
        )
    return element.build()


def voice(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Voice")
    lengths = _sentence_lengths(document)
    average = mean(lengths) if lengths else 0.0
    spread = pstdev(lengths) if lengths else 0.0
    if spread > 8:
        element.add(25)
        element.details.append("Varied sentence rhythm")
        element.insights.append("Good sentence-level pacing")
    elif spread < 4:
        element.add(10)
        element.insights.append("Sentence length is very consistent; consider varying rhythm")
    else:
        element.add(20)
    first = index.count("first person")
    third = index.count("third person")
    if first > third:
        element.add(20)
        element.details.append("First person narration")
    elif third > first:
        element.add(20)
        element.details.append("Third person narration")
    if average > 20:
        element.add(15)
        element.details.append("Lyrical, complex style")
    elif average < 12:
        element.add(15)
        element.details.append("Concise, minimalist style")
    else:
        element.add(20)
        element.details.append("Balanced prose style")
    if index.count("voice.sophisticated") > 0:
        element.details.append("Distinctive word choices")
    if index.count("voice.imagery") > 3:
        element.add(20)
        element.details.append("Rich in simile and metaphor")
    return element.build()


def genre(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Genre & Subgenre")
    counts = index.group_counts("genre")
    dominant, top = "General Fiction", 0
    for name, count in counts.items():
        if count > top:
            dominant, top = name, count
    if top > 5:
        element.add(60)
        element.details.append(f"Strong {dominant} elements")
        element.insights.append(f"Clear genre markers for {dominant}")
    elif top > 2:
        element.add(40)
        element.details.append(f"{dominant} indicators present")
    else:
        element.add(20)
        element.details.append("Genre-neutral or literary fiction")
        element.insights.append("No dominant genre markers; intentional?")
    blended = [name for name, count in counts.items() if count > 2]
    if len(blended) > 1:
        element.add(20)
        element.insights.append(f"Genre blending detected: {', '.join(blended)}")
    return element.build()


def structure(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Structure")
    paragraph_count = len(document.paragraphs)
    sentence_count = document.sentence_count
    if paragraph_count > 5:
        element.add(25)
        element.details.append(f"{paragraph_count} paragraphs")
    else:
        element.add(15)
        element.details.append(f"{paragraph_count} paragraph(s)")
        if paragraph_count < 3:
            element.insights.append("Consider breaking into more paragraphs for readability")
    scene_breaks = len(SCENE_BREAK_RE.findall(document.text))
    if scene_breaks > 0:
        element.add(15)
        element.details.append(f"{scene_breaks} scene break(s)")
    if sentence_count > 15:
        element.add(30)
        element.insights.append("Sufficient length for three-act structure")
    else:
        element.add(20)
    per_paragraph = sentence_count / paragraph_count if paragraph_count else 0.0
    if 3 < per_paragraph < 8:
        element.add(20)
        element.details.append("Balanced paragraph density")
    elif per_paragraph > 8:
        element.add(10)
        element.insights.append("Long paragraphs; consider varying length for rhythm")
    else:
        element.add(15)
        element.details.append("Short, punchy paragraphs")
    if "Chapter" in document.text or "CHAPTER" in document.text:
        element.add(10)
        element.details.append("Chapter divisions present")
    return element.build()


def pacing(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Pacing")
    lengths = _sentence_lengths(document)
    short = sum(1 for length in lengths if length < 10)
    long = sum(1 for length in lengths if length > 25)
    if lengths and short > len(lengths) * 0.4:
        element.add(30)
        element.details.append("Fast pacing (short sentences)")
        element.insights.append("Brisk narrative momentum")
    elif lengths and long > len(lengths) * 0.3:
        element.add(25)
        element.details.append("Slow, immersive pacing")
        element.insights.append("Contemplative, detailed style")
    else:
        element.add(35)
        element.details.append("Varied pacing")
        element.insights.append("Good balance of speed and detail")
    actions = index.count("pacing.actions")
    descriptive = index.count("pacing.descriptive")
    if actions > descriptive:
        element.add(25)
        element.details.append("Action-driven pacing")
    elif descriptive > actions * 2:
        element.add(20)
        element.details.append("Description-heavy pacing")
        element.insights.append("Consider adding more active scenes")
    else:
        element.add(30)
        element.details.append("Balanced action and description")
    if _dialogue_marks(document.text) > 10:
        element.add(10)
        element.insights.append("Dialogue adds dynamic pacing")
    return element.build()


def worldbuilding(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element("Worldbuilding")
    world = index.count("worldbuilding.world")
    element.add(world * 3, cap=40)
    if world > 8:
        element.details.append("Rich world description")
        element.insights.append("Detailed worldbuilding present")
    if index.count("worldbuilding.history") > 3:
        element.add(25)
        element.details.append("Historical depth")
    if index.count("worldbuilding.culture") > 2:
        element.add(20)
        element.details.append("Cultural elements")
    # Counted on the original casing so named entities are visible.
    if len(CAPITALIZED_RE.findall(document.text)) > 10:
        element.add(15)
        element.details.append("Multiple named entities")
    if element.score < 30:
        element.insights.append(
            "Worldbuilding is minimal; appropriate for realistic or character-driven fiction"
        )
    if world == 0:
        element.details.append("Contemporary or minimal setting")
    return element.build()


def emotional_core(document: Document, index: OccurrenceIndex) -> DimensionScore:
    element = _Element(EMOTIONAL_CORE)
    emotions = index.count("emotion.words")
    element.add(emotions * 3, cap=40)
    if emotions > 8:
        element.details.append("Strong emotional content")
        element.insights.append("Rich emotional landscape")
    elif emotions < 3:
        element.insights.append(
            "Limited emotional language; consider deepening character feelings"
        )
    if index.count("emotion.empathy") > 3:
        element.add(25)
        element.details.append("Emotional awareness present")
    if index.count("emotion.vulnerability") > 0:
        element.add(20)
        element.details.append("Emotional vulnerability shown")
        element.insights.append("Characters reveal authentic humanity")
    if index.count("emotion.connection") > 2:
        element.add(15)
        element.details.append("Relationship focus")
    if index.count("emotion.thought") > 3:
        element.add(10)
        element.insights.append("Internal reflection adds depth")
    if element.score < 40:
        element.insights.append(
            "Emotional core could be strengthened; what do characters truly feel?"
        )
    return element.build()


ELEMENTS: tuple[Callable[[Document, OccurrenceIndex], DimensionScore], ...] = (
    characters,
    setting,
    time,
    plot,
    conflict,
    theme,
    voice,
    genre,
    structure,
    pacing,
    worldbuilding,
    emotional_core,
)


def element_balance(components: List[DimensionScore]) -> float:
    if not components:
        return 0.0
    return float(round(max(0.0, 100 - pstdev([c.score for c in components]) * 2)))


class FictionElementsAnalyzer(DimensionAnalyzer):
    """Scores the twelve core fiction elements and reports their mean."""

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        document = context.document
        if document.is_empty:
            return dimension_score(
                NAME, 0, details=["No words to analyze for fiction elements."]
            )
        components = [element(document, context.index) for element in ELEMENTS]
        score = round(mean(component.score for component in components), 2)
        weak = [c for c in components if c.score < 40]
        strong = [c for c in components if c.score >= 70]
        details: List[str] = []
        if strong:
            details.append(f"Strong elements: {', '.join(c.name for c in strong[:3])}")
        if weak:
            details.append(f"Focus areas: {', '.join(c.name for c in weak[:3])}")
        insights = [c.insights[0] for c in weak if c.insights]
        metrics = {component.name: component.score for component in components}
        metrics["balance"] = element_balance(components)
        return dimension_score(
            NAME,
            score,
            details=details,
            insights=insights,
            metrics=metrics,
            components=components,
        )
