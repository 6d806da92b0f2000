from __future__ import annotations

from typing import Dict, List, Type

from .base import AnalysisContext, DimensionAnalyzer
from .conflict import ConflictAnalyzer
from .dialogue import DialogueRatioAnalyzer
from .dual_coding import DualCodingAnalyzer
from .fiction_elements import FictionElementsAnalyzer
from .readability import ReadabilityAnalyzer
from .scene_sequel import SceneSequelAnalyzer
from .sensory import SensoryBalanceAnalyzer
from .spacing import SpacingAnalyzer
from .themes import ThemeSymbolAnalyzer

__all__ = [
    "AnalysisContext",
    "DimensionAnalyzer",
    "ConflictAnalyzer",
    "DialogueRatioAnalyzer",
    "DualCodingAnalyzer",
    "FictionElementsAnalyzer",
    "ReadabilityAnalyzer",
    "SceneSequelAnalyzer",
    "SensoryBalanceAnalyzer",
    "SpacingAnalyzer",
    "ThemeSymbolAnalyzer",
    "create_analyzer",
    "default_analyzers",
    "tier_analyzers",
]

# Report order; recommendations and strengths follow it.
REPORT_ANALYZERS: tuple[Type[DimensionAnalyzer], ...] = (
    FictionElementsAnalyzer,
    ThemeSymbolAnalyzer,
    DialogueRatioAnalyzer,
    SceneSequelAnalyzer,
    ConflictAnalyzer,
    SensoryBalanceAnalyzer,
    ReadabilityAnalyzer,
)
TIER_ANALYZERS: tuple[Type[DimensionAnalyzer], ...] = (SpacingAnalyzer, DualCodingAnalyzer)

_REGISTRY: Dict[str, Type[DimensionAnalyzer]] = {
    cls.name.lower(): cls for cls in REPORT_ANALYZERS + TIER_ANALYZERS
}


def create_analyzer(name: str) -> DimensionAnalyzer:
    """Factory for building analyzers by dimension name."""
    normalized = name.lower().strip()
    try:
        return _REGISTRY[normalized]()
    except KeyError:
        raise ValueError(f"Unknown analyzer '{name}'.") from None


def default_analyzers() -> List[DimensionAnalyzer]:
    return [cls() for cls in REPORT_ANALYZERS]


def tier_analyzers() -> List[DimensionAnalyzer]:
    return [cls() for cls in TIER_ANALYZERS]
