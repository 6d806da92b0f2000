from __future__ import annotations

import re
from typing import List

from ..models import DimensionScore, Paragraph
from ..scoring import dimension_score
from ..textutils import clamp, truncate
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Spacing & Chunking"
COMPACT_LIMIT = 60
EXTENDED_LIMIT = 160

SPACING_WORD_RE = re.compile(r"[A-Za-z0-9'’]+")

COMPACT_MESSAGE = (
    "This paragraph is compact; consider adding examples or explanation if the idea "
    "feels rushed."
)
EXTENDED_MESSAGE = (
    "This paragraph is long; split it or add a subheading so readers can process the "
    "concept in steps."
)


def spacing_word_count(text: str) -> int:
    return len(SPACING_WORD_RE.findall(text))


def spacing_tone(word_count: int) -> str:
    if word_count < COMPACT_LIMIT:
        return "compact"
    if word_count > EXTENDED_LIMIT:
        return "extended"
    return "balanced"


def _paragraph_numbers(paragraphs: List[Paragraph]) -> str:
    return ", ".join(str(paragraph.index + 1) for paragraph in paragraphs)


class SpacingAnalyzer(DimensionAnalyzer):
    """Rates how evenly the text is chunked into 60-160 word paragraphs."""

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        paragraphs = list(context.document.paragraphs)
        if not paragraphs:
            return dimension_score(NAME, 0, details=["No paragraphs to assess."])

        compact: List[Paragraph] = []
        extended: List[Paragraph] = []
        details: List[str] = []
        for paragraph in paragraphs:
            tone = spacing_tone(spacing_word_count(paragraph.text))
            if tone == "compact":
                compact.append(paragraph)
                details.append(f"Paragraph {paragraph.index + 1}: {COMPACT_MESSAGE}")
            elif tone == "extended":
                extended.append(paragraph)
                details.append(f"Paragraph {paragraph.index + 1}: {EXTENDED_MESSAGE}")
        balanced = len(paragraphs) - len(compact) - len(extended)
        raw = 78 + balanced / len(paragraphs) * 20 - len(extended) * 6 - len(compact) * 3
        score = clamp(round(raw), 35, 98)

        insights: List[str] = []
        if extended:
            insights.append(
                f"Paragraphs {_paragraph_numbers(extended)} exceed {EXTENDED_LIMIT} words. "
                "Split them into tighter segments to restore the target spacing cadence."
            )
        if compact:
            insights.append(
                f"Paragraphs {_paragraph_numbers(compact)} fall below the {COMPACT_LIMIT}-word "
                "guidance. Add examples or bridges to slow the pacing slightly."
            )
        details.extend(
            f"Example: {truncate(paragraph.text, 120)}" for paragraph in (extended + compact)[:2]
        )
        return dimension_score(
            NAME,
            score,
            details=details,
            insights=insights,
            metrics={
                "paragraphs": len(paragraphs),
                "balanced": balanced,
                "compact": len(compact),
                "extended": len(extended),
            },
        )
