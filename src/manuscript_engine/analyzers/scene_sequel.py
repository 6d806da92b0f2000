from __future__ import annotations

from typing import List

from ..models import BalanceLevel, DimensionScore
from ..scoring import dimension_score
from ..windowing import average_length_by_label, label_counts
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Scene/Sequel Balance"
SCENE = "scene"
SEQUEL = "sequel"

BALANCE_SCORES = {"excellent": 90, "good": 75, "unbalanced": 50}


def scene_sequel_ratio(scenes: int, sequels: int) -> float:
    return scenes / sequels if sequels > 0 else float(scenes)


def balance_label(ratio: float) -> BalanceLevel:
    if ratio > 5 or ratio < 1:
        return "unbalanced"
    if ratio > 3 or ratio < 1.5:
        return "good"
    return "excellent"


class SceneSequelAnalyzer(DimensionAnalyzer):
    """Scores the ratio of action windows to reflection windows."""

    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        windows = context.windows
        indicator_hits = context.index.group_total("scene") + context.index.group_total("sequel")
        if not windows or indicator_hits == 0:
            return dimension_score(
                NAME, 0, details=["No scene or sequel indicators detected."]
            )

        counts = label_counts(windows)
        scenes = counts.get(SCENE, 0)
        sequels = counts.get(SEQUEL, 0)
        ratio = scene_sequel_ratio(scenes, sequels)
        balance = balance_label(ratio)
        lengths = average_length_by_label(windows)

        insights: List[str] = []
        if ratio > 4:
            insights.append("Too many scenes - add more reflection and character processing")
        elif ratio < 1.5:
            insights.append("Too much reflection - increase action and goal-oriented scenes")
        if scenes == 0:
            insights.append("No clear scene structure detected - add more action sequences")
        if sequels == 0:
            insights.append(
                "No sequel/reflection detected - add character reaction and decision points"
            )

        details = [
            f"{scenes} scene window(s), {sequels} sequel window(s)",
            f"Scene to sequel ratio {ratio:.2f} ({balance})",
        ]
        details.extend(
            f"Window {window.index}: {window.label} at intensity {window.intensity}"
            for window in windows
        )
        return dimension_score(
            NAME,
            BALANCE_SCORES[balance],
            details=details,
            insights=insights,
            balance=balance,
            metrics={
                "scene_count": scenes,
                "sequel_count": sequels,
                "ratio": round(ratio, 2),
                "average_scene_length": round(lengths.get(SCENE, 0.0), 2),
                "average_sequel_length": round(lengths.get(SEQUEL, 0.0), 2),
            },
        )
