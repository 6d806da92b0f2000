from __future__ import annotations

from dataclasses import dataclass
from statistics import mean
from typing import List

from ..matching import OccurrenceIndex
from ..models import DimensionScore, Document
from ..scoring import dimension_score
from ..textutils import truncate
from ..windowing import density_per_thousand
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Conflict Tracking"
CONFLICT_TYPES = ("internal", "external", "interpersonal")
RESOLUTION_CLUSTER = "resolution"
LOW_CONFLICT_THRESHOLD = 2
DESCRIPTION_LIMIT = 100


@dataclass(frozen=True, slots=True)
class ConflictInstance:
    type: str
    keyword: str
    position: int
    intensity: int
    description: str
    resolved: bool


def find_conflicts(document: Document, index: OccurrenceIndex) -> List[ConflictInstance]:
    """One instance per distinct conflict keyword of a type found in a sentence."""
    conflicts: List[ConflictInstance] = []
    for sentence in document.sentences:
        start, end = sentence.start_char, sentence.end_char
        resolved = index.count_in_range(RESOLUTION_CLUSTER, start, end) > 0
        for conflict_type in CONFLICT_TYPES:
            keywords = list(
                dict.fromkeys(hit.keyword for hit in index.in_range(conflict_type, start, end))
            )
            if not keywords:
                continue
            intensity = min(100, 40 + len(keywords) * 15)
            for keyword in keywords:
                conflicts.append(
                    ConflictInstance(
                        type=conflict_type,
                        keyword=keyword,
                        position=start,
                        intensity=intensity,
                        description=truncate(sentence.text, DESCRIPTION_LIMIT),
                        resolved=resolved,
                    )
                )
    return conflicts


def low_conflict_sections(
    conflicts: List[ConflictInstance], text_length: int, chunk_chars: int
) -> List[int]:
    """Start offsets of fixed-size character chunks holding fewer than two conflicts."""
    sections: List[int] = []
    for chunk_start in range(0, text_length, max(1, chunk_chars)):
        chunk_end = chunk_start + chunk_chars
        inside = sum(1 for c in conflicts if chunk_start <= c.position < chunk_end)
        if inside < LOW_CONFLICT_THRESHOLD:
            sections.append(chunk_start)
    return sections


class ConflictAnalyzer(DimensionAnalyzer):
    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        document = context.document
        conflicts = find_conflicts(document, context.index)
        counts = {kind: sum(1 for c in conflicts if c.type == kind) for kind in CONFLICT_TYPES}
        density = density_per_thousand(len(conflicts), document.word_count)
        sections = low_conflict_sections(
            conflicts, len(document.text), context.config.conflict_chunk_chars
        )
        resolutions = sorted({c.position for c in conflicts if c.resolved})

        insights: List[str] = []
        if density < 1:
            insights.append("Low overall conflict - consider adding more tension and obstacles")
        if len(sections) > 3:
            insights.append(
                f"{len(sections)} sections have minimal conflict - add stakes and challenges"
            )
        if counts["internal"] == 0:
            insights.append(
                "No internal conflict detected - develop character struggles and doubts"
            )
        if counts["external"] == 0 and counts["interpersonal"] == 0:
            insights.append(
                "No external conflict - add obstacles, antagonists, or environmental challenges"
            )

        if not conflicts:
            reason = (
                "No words to track conflict in." if document.is_empty else "No conflict detected."
            )
            return dimension_score(
                NAME,
                0,
                details=[reason],
                insights=insights if not document.is_empty else (),
                metrics={
                    "total_conflicts": 0,
                    "density": 0.0,
                    "average_intensity": 0.0,
                    "peak_intensity": 0,
                },
            )

        average_intensity = mean(c.intensity for c in conflicts)
        # Peak, not mean: one more keyword must never lower the score.
        peak_intensity = max(c.intensity for c in conflicts)
        score = min(100.0, 40 + density * 10 + peak_intensity / 2)
        details = [
            f"{len(conflicts)} conflict instance(s): "
            + ", ".join(f"{counts[kind]} {kind}" for kind in CONFLICT_TYPES),
            f"{density:.1f} conflicts per 1,000 words",
            f"{len(resolutions)} resolution point(s)",
        ]
        if sections:
            details.append(f"{len(sections)} low-conflict section(s)")
        return dimension_score(
            NAME,
            score,
            details=details,
            insights=insights,
            metrics={
                "total_conflicts": len(conflicts),
                "internal": counts["internal"],
                "external": counts["external"],
                "interpersonal": counts["interpersonal"],
                "density": round(density, 2),
                "average_intensity": round(average_intensity, 2),
                "peak_intensity": peak_intensity,
                "low_conflict_sections": len(sections),
                "resolution_points": len(resolutions),
            },
        )
