from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List

from ..models import BalanceLevel, DimensionScore
from ..scoring import dimension_score
from .base import AnalysisContext, DimensionAnalyzer

logger = logging.getLogger(__name__)

NAME = "Dialogue/Narrative Ratio"
DEFAULT_GENRE = "general"
AXIS_DEVIATION_LIMIT = 15

DIALOGUE_PATTERNS = (re.compile(r'"([^"]+)"'), re.compile(r"“([^”]+)”"))


@dataclass(frozen=True, slots=True)
class GenreTarget:
    dialogue: float
    description: float
    action: float


GENRE_TARGETS: Dict[str, GenreTarget] = {
    "thriller": GenreTarget(30, 20, 50),
    "romance": GenreTarget(45, 35, 20),
    "mystery": GenreTarget(35, 30, 35),
    "fantasy": GenreTarget(30, 45, 25),
    "scifi": GenreTarget(30, 40, 30),
    "horror": GenreTarget(25, 35, 40),
    "literary": GenreTarget(35, 50, 15),
    "historical": GenreTarget(35, 45, 20),
    "general": GenreTarget(35, 35, 30),
}


def resolve_genre(genre: str | None) -> str:
    """Normalize a genre key, falling back to the general profile."""
    key = (genre or DEFAULT_GENRE).strip().lower()
    if key not in GENRE_TARGETS:
        logger.warning("Unknown genre '%s'; using the '%s' profile.", genre, DEFAULT_GENRE)
        return DEFAULT_GENRE
    return key


def dialogue_word_count(text: str) -> int:
    total = 0
    for pattern in DIALOGUE_PATTERNS:
        for found in pattern.finditer(text):
            total += len(found.group(1).split())
    return total


def balance_label(total_deviation: float) -> BalanceLevel:
    if total_deviation > 40:
        return "needs-adjustment"
    if total_deviation > 20:
        return "good"
    return "excellent"


class DialogueRatioAnalyzer(DimensionAnalyzer):
    """Compares dialogue, description and action shares with a genre target."""

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        document = context.document
        genre = resolve_genre(context.genre)
        target = GENRE_TARGETS[genre]
        total = document.word_count
        if total == 0:
            return dimension_score(NAME, 0, details=["No words to measure dialogue against."])

        dialogue = dialogue_word_count(document.text)
        action = context.index.group_total("action") * context.config.action_word_span
        description = max(0, total - dialogue - action)

        dialogue_pct = dialogue / total * 100
        description_pct = description / total * 100
        action_pct = action / total * 100

        dialogue_diff = abs(dialogue_pct - target.dialogue)
        description_diff = abs(description_pct - target.description)
        action_diff = abs(action_pct - target.action)
        total_diff = dialogue_diff + description_diff + action_diff
        balance = balance_label(total_diff)

        insights: List[str] = []
        if dialogue_diff > AXIS_DEVIATION_LIMIT:
            if dialogue_pct < target.dialogue:
                insights.append(
                    f"Increase dialogue - add {target.dialogue - dialogue_pct:.0f}% "
                    "more conversations"
                )
            else:
                insights.append(
                    f"Reduce dialogue - cut {dialogue_pct - target.dialogue:.0f}% "
                    "for better balance"
                )
        if description_diff > AXIS_DEVIATION_LIMIT:
            insights.append(
                "Add more description - enrich settings and sensory details"
                if description_pct < target.description
                else "Trim description - keep it concise and impactful"
            )
        if action_diff > AXIS_DEVIATION_LIMIT:
            insights.append(
                "Increase action - add more movement and tension"
                if action_pct < target.action
                else "Reduce action pacing - allow for breathing room"
            )

        details = [
            f"Dialogue {dialogue_pct:.0f}% (target {target.dialogue:.0f}%)",
            f"Description {description_pct:.0f}% (target {target.description:.0f}%)",
            f"Action {action_pct:.0f}% (target {target.action:.0f}%)",
            f"Balance: {balance} for {genre}",
        ]
        return dimension_score(
            NAME,
            100 - total_diff,
            details=details,
            insights=insights,
            balance=balance,
            metrics={
                "dialogue_words": dialogue,
                "description_words": description,
                "action_words": action,
                "dialogue_percentage": round(dialogue_pct, 2),
                "description_percentage": round(description_pct, 2),
                "action_percentage": round(action_pct, 2),
                "total_deviation": round(total_diff, 2),
            },
        )
