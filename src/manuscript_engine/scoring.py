from __future__ import annotations

from statistics import mean, pstdev
from typing import Iterable, List, Mapping, Sequence

from .models import BalanceLevel, DimensionScore, PresenceLevel
from .textutils import clamp

STRONG_THRESHOLD = 70
MODERATE_THRESHOLD = 40
WEAK_THRESHOLD = 20
MAX_HIGHLIGHTS = 3


def presence_level(score: float) -> PresenceLevel:
    """Map a 0-100 score onto the shared presence buckets."""
    if score >= STRONG_THRESHOLD:
        return "strong"
    if score >= MODERATE_THRESHOLD:
        return "moderate"
    if score >= WEAK_THRESHOLD:
        return "weak"
    return "absent"


def dimension_score(
    name: str,
    score: float,
    *,
    details: Iterable[str] = (),
    insights: Iterable[str] = (),
    metrics: Mapping[str, float] | None = None,
    components: Iterable[DimensionScore] = (),
    balance: BalanceLevel | None = None,
) -> DimensionScore:
    """Build a DimensionScore with the score clamped and presence derived from it."""
    bounded = float(clamp(score))
    return DimensionScore(
        name=name,
        score=bounded,
        presence=presence_level(bounded),
        details=tuple(details),
        insights=tuple(insights),
        metrics=dict(metrics or {}),
        components=tuple(components),
        balance=balance,
    )


def overall_score(
    scores: Sequence[DimensionScore], weights: Mapping[str, float] | None = None
) -> float:
    """
    Mean of the dimension scores, or ``sum(score * weight) / sum(weight)``
    when weights are supplied. Dimensions missing from ``weights`` weigh 1.0.
    """
    if not scores:
        return 0.0
    if not weights:
        return round(mean(score.score for score in scores), 2)
    total_weight = sum(weights.get(score.name, 1.0) for score in scores)
    if total_weight <= 0:
        return 0.0
    weighted = sum(score.score * weights.get(score.name, 1.0) for score in scores)
    return round(weighted / total_weight, 2)


def balance_score(scores: Sequence[DimensionScore]) -> float:
    """``max(0, 100 - 2 * stddev)`` over the dimension scores."""
    if not scores:
        return 0.0
    spread = pstdev([score.score for score in scores])
    return round(max(0.0, 100.0 - 2 * spread), 2)


def strengths(scores: Sequence[DimensionScore], limit: int = MAX_HIGHLIGHTS) -> List[str]:
    strong = [score for score in scores if score.score >= STRONG_THRESHOLD]
    strong.sort(key=lambda score: -score.score)
    return [score.name for score in strong[:limit]]


def weaknesses(
    scores: Sequence[DimensionScore],
    limit: int = MAX_HIGHLIGHTS,
    threshold: float = MODERATE_THRESHOLD,
) -> List[str]:
    weak = [score for score in scores if score.score < threshold]
    weak.sort(key=lambda score: score.score)
    return [score.name for score in weak[:limit]]
