from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..matching import OccurrenceIndex
from ..models import BalanceLevel, DimensionScore, Document
from ..scoring import dimension_score
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Sensory Balance"
SENSES = ("sight", "sound", "touch", "smell", "taste")
CONTEXT_CHARS = 30

BALANCE_SCORES = {"excellent": 90, "good": 75, "visual-heavy": 60, "needs-variety": 50}


@dataclass(frozen=True, slots=True)
class SensoryInstance:
    sense: str
    word: str
    position: int
    context: str


def sensory_instances(document: Document, index: OccurrenceIndex) -> List[SensoryInstance]:
    text = document.text
    instances: List[SensoryInstance] = []
    for sense in SENSES:
        for hit in index.occurrences(sense):
            start = max(0, hit.char_offset - CONTEXT_CHARS)
            end = min(len(text), hit.char_offset + len(hit.keyword) + CONTEXT_CHARS)
            instances.append(
                SensoryInstance(
                    sense=sense, word=hit.keyword, position=hit.char_offset, context=text[start:end]
                )
            )
    return instances


def balance_label(percentages: Dict[str, float]) -> BalanceLevel:
    if percentages["sight"] > 70:
        return "visual-heavy"
    if any(percentages[sense] < 5 for sense in SENSES if sense != "sight"):
        return "needs-variety"
    if percentages["sight"] > 60:
        return "good"
    return "excellent"


class SensoryBalanceAnalyzer(DimensionAnalyzer):
    """Measures how evenly the five senses are used."""

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        instances = sensory_instances(context.document, context.index)
        counts = {sense: sum(1 for i in instances if i.sense == sense) for sense in SENSES}
        total = len(instances)
        if total == 0:
            return dimension_score(
                NAME,
                0,
                details=["No sensory language detected."],
                metrics={f"{sense}_count": 0 for sense in SENSES},
            )
        percentages = {sense: counts[sense] / total * 100 for sense in SENSES}
        balance = balance_label(percentages)

        insights: List[str] = []
        if percentages["sight"] > 65:
            insights.append(
                f"{percentages['sight']:.0f}% visual focus - "
                "add more sound, touch, smell, and taste"
            )
        if percentages["sound"] < 10:
            insights.append("Underutilized sound - add ambient noise, dialogue tone, music, etc.")
        if percentages["touch"] < 10:
            insights.append(
                "Low tactile descriptions - add texture, temperature, physical sensation"
            )
        if counts["smell"] < 3:
            insights.append("Missing smell descriptions - powerful for memory and atmosphere")
        if counts["taste"] < 2:
            insights.append(
                "Minimal taste references - consider food scenes or environmental tastes"
            )

        details = [f"{sense}: {counts[sense]} ({percentages[sense]:.0f}%)" for sense in SENSES]
        details.append(f"Balance: {balance}")
        details.extend(f'{i.sense} "{i.context.strip()}"' for i in instances[:5])
        metrics: Dict[str, float] = {f"{sense}_count": counts[sense] for sense in SENSES}
        metrics.update(
            {f"{sense}_percentage": round(percentages[sense], 2) for sense in SENSES}
        )
        metrics["total"] = total
        return dimension_score(
            NAME,
            BALANCE_SCORES[balance],
            details=details,
            insights=insights,
            metrics=metrics,
            balance=balance,
        )
