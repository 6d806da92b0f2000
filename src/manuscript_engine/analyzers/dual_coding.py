from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Literal, Sequence

from ..clusters import ClusterTable
from ..markup import TextBlock
from ..matching import match_cluster
from ..models import DimensionScore
from ..scoring import dimension_score
from ..textutils import clamp, truncate
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Dual Coding"
MIN_PARAGRAPH_CHARS = 50
NEARBY_VISUAL_CHARS = 500
MAX_SOURCE_CHARS = 500_000

Priority = Literal["high", "medium", "low"]
PRIORITY_VALUES = {"high": 3, "medium": 2, "low": 1}

NEARBY_VISUAL_RE = re.compile(
    r"\bfigure\s+\d+|\bdiagram\s+\d+|\bchart\s+\d+|\bgraph\s+\d+|\bimage\s+\d+|\bfig\.\s*\d+",
    re.IGNORECASE,
)
QUANTITY_RE = re.compile(
    r"\b\d+(\.\d+)?\s*(percent|%|times|fold|ratio|proportion)\b", re.IGNORECASE
)
VERSUS_ABBREVIATION_RE = re.compile(r"\bvs\.", re.IGNORECASE)
UPPER_RUN_RE = re.compile(r"[A-Z]{2,}")
PARENTHETICAL_RE = re.compile(r"\([^)]+\)")

VISUAL_LABELS = {
    "diagram": "Diagram",
    "flowchart": "Flowchart",
    "graph": "Graph",
    "concept-map": "Concept map",
    "illustration": "Illustration",
}


@dataclass(frozen=True, slots=True)
class VisualSuggestion:
    position: int
    excerpt: str
    reason: str
    visual_type: str
    priority: Priority

    @property
    def message(self) -> str:
        label = VISUAL_LABELS.get(self.visual_type, self.visual_type.title())
        return f"{label} needed: {self.reason}"


def technical_density(text: str) -> float:
    words = text.split()
    if not words:
        return 0.0
    technical = [
        word
        for word in words
        if len(word) > 10
        or UPPER_RUN_RE.search(word)
        or "-" in word
        or PARENTHETICAL_RE.search(word)
    ]
    return len(technical) / len(words)


def has_nearby_visual(source: str, position: int) -> bool:
    start = max(0, position - NEARBY_VISUAL_CHARS)
    end = min(len(source), position + NEARBY_VISUAL_CHARS)
    return NEARBY_VISUAL_RE.search(source, start, end) is not None


def _pattern_counts(text: str, table: ClusterTable) -> Dict[str, int]:
    counts = {
        cluster.name: len(match_cluster(text, cluster))
        for cluster in table.group("dual_coding")
    }
    counts["quantitative"] = (
        counts.get("quantitative", 0)
        + len(QUANTITY_RE.findall(text))
        + len(VERSUS_ABBREVIATION_RE.findall(text))
    )
    return counts


def _level(high: bool) -> Priority:
    return "high" if high else "medium"


def analyze_paragraph(text: str, position: int, table: ClusterTable) -> List[VisualSuggestion]:
    """Suggest visuals for one paragraph; paragraphs of 50 characters or fewer are skipped."""
    paragraph = text.strip()
    if len(paragraph) < MIN_PARAGRAPH_CHARS:
        return []
    excerpt = truncate(paragraph, 150)
    counts = _pattern_counts(paragraph, table)
    length = len(paragraph)
    suggestions: List[VisualSuggestion] = []

    def suggest(reason: str, visual_type: str, priority: Priority) -> None:
        suggestions.append(VisualSuggestion(position, excerpt, reason, visual_type, priority))

    spatial = counts.get("spatial", 0)
    if spatial >= 2 and length > 80:
        suggest("Contains spatial/structural descriptions", "diagram", _level(spatial >= 4))
    process = counts.get("process", 0)
    if process >= 2 and length > 80:
        suggest("Describes a process or sequence", "flowchart", _level(process >= 4))
    quantitative = counts.get("quantitative", 0)
    if quantitative >= 2 and length > 60:
        suggest(
            "Contains quantitative data or comparisons",
            "graph",
            _level(quantitative >= 4),
        )
    if counts.get("concept", 0) >= 2 and length > 100:
        suggest("Explains abstract concepts", "concept-map", "medium")
    density = technical_density(paragraph)
    if density > 0.12 and length > 120:
        suggest("High density of technical terms", "illustration", _level(density > 0.2))
    if counts.get("system", 0) >= 3 and length > 100:
        suggest("Describes system or components", "diagram", "medium")
    return suggestions


def deduplicate(suggestions: Sequence[VisualSuggestion]) -> List[VisualSuggestion]:
    """Keep the highest-priority suggestion per position, sorted by priority then position."""
    best: Dict[int, VisualSuggestion] = {}
    for suggestion in suggestions:
        existing = best.get(suggestion.position)
        rank = PRIORITY_VALUES[suggestion.priority]
        if existing is None or rank > PRIORITY_VALUES[existing.priority]:
            best[suggestion.position] = suggestion
    return sorted(best.values(), key=lambda s: (-PRIORITY_VALUES[s.priority], s.position))


def suggest_visuals(
    source: str, blocks: Sequence[TextBlock], table: ClusterTable
) -> List[VisualSuggestion]:
    source = source[:MAX_SOURCE_CHARS]
    suggestions: List[VisualSuggestion] = []
    for block in blocks:
        if len(block.text) <= MIN_PARAGRAPH_CHARS or block.position >= len(source):
            continue
        if has_nearby_visual(source, block.position):
            continue
        suggestions.extend(analyze_paragraph(block.text, block.position, table))
    return deduplicate(suggestions)


class DualCodingAnalyzer(DimensionAnalyzer):
    """Finds passages that would benefit from a paired visual."""

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        document = context.document
        if document.is_empty:
            return dimension_score(NAME, 0, details=["No text to scan for visual opportunities."])
        if context.blocks and context.source_text:
            source, blocks = context.source_text, list(context.blocks)
        else:
            source = document.text
            blocks = [TextBlock(p.text, p.start_char) for p in document.paragraphs]
        suggestions = suggest_visuals(source, blocks, context.index.table)
        high = sum(1 for s in suggestions if s.priority == "high")
        score = clamp(round(90 - high * 8 - (len(suggestions) - high) * 4), 30, 97)
        insights: List[str] = []
        if suggestions:
            insights.append(
                f"Add {len(suggestions)} visual aid(s), {high} of them high priority, "
                "to pair dense passages with diagrams or charts."
            )
        return dimension_score(
            NAME,
            score,
            details=[f"{s.message} (position {s.position})" for s in suggestions],
            insights=insights,
            metrics={"suggestions": len(suggestions), "high_priority": high},
        )
