from __future__ import annotations

from typing import List, Sequence

from .analyzers.fiction_elements import EMOTIONAL_CORE
from .analyzers.fiction_elements import NAME as FICTION_ELEMENTS
from .analyzers.themes import MAX_FOCUSED_THEMES, NO_SYMBOLS, TOO_MANY_THEMES
from .analyzers.themes import NAME as THEME_SYMBOL
from .models import DimensionScore
from .scoring import MODERATE_THRESHOLD

NEAR_ABSENCE = (
    "Thematic and emotional content is nearly absent. Introduce recurring themes and "
    "show what your characters feel."
)
UNEVEN_BALANCE = "Consider balancing narrative elements more evenly across all categories."
BALANCE_FLOOR = 60
EMOTIONAL_CORE_FLOOR = 20


def _find(scores: Sequence[DimensionScore], name: str) -> DimensionScore | None:
    for score in scores:
        if score.name == name:
            return score
    return None


def _near_total_absence(scores: Sequence[DimensionScore]) -> bool:
    themes = _find(scores, THEME_SYMBOL)
    fiction = _find(scores, FICTION_ELEMENTS)
    if themes is None or fiction is None:
        return False
    core = next((c for c in fiction.components if c.name == EMOTIONAL_CORE), None)
    if core is None:
        return False
    return themes.metrics.get("total_mentions", 0) == 0 and core.score < EMOTIONAL_CORE_FLOOR


def synthesize_recommendations(
    scores: Sequence[DimensionScore],
    balance: float,
    *,
    cap: int = 5,
    weak_threshold: float = MODERATE_THRESHOLD,
) -> List[str]:
    """
    Build the ordered, de-duplicated recommendation list for a report.

    Order: near-total absence of thematic and emotional content, the first
    insight of each weak dimension in report order, too many themes, no
    symbolic patterns, then uneven balance. Truncated to ``cap``.
    """
    candidates: List[str] = []
    if _near_total_absence(scores):
        candidates.append(NEAR_ABSENCE)
    for score in scores:
        if score.score < weak_threshold and score.insights:
            candidates.append(score.insights[0])
    themes = _find(scores, THEME_SYMBOL)
    if themes is not None:
        if themes.metrics.get("theme_count", 0) > MAX_FOCUSED_THEMES:
            candidates.append(TOO_MANY_THEMES)
        if themes.metrics.get("symbol_count", 0) == 0:
            candidates.append(NO_SYMBOLS)
    if balance < BALANCE_FLOOR:
        candidates.append(UNEVEN_BALANCE)
    return list(dict.fromkeys(candidates))[: max(0, cap)]
