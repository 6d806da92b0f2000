from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from ..markup import TextBlock
from ..matching import OccurrenceIndex
from ..models import Document, DimensionScore, Window

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import EngineConfig


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """Shared, read-only inputs handed to every dimensional analyzer."""

    document: Document
    index: OccurrenceIndex
    config: "EngineConfig"
    windows: Sequence[Window] = field(default_factory=tuple)
    genre: str = "general"
    blocks: Sequence[TextBlock] = field(default_factory=tuple)
    source_text: str | None = None


class DimensionAnalyzer(ABC):
    """Abstract analyzer that scores one dimension of a manuscript."""

    name: str = ""

    @abstractmethod
    def analyze(self, context: AnalysisContext) -> DimensionScore:
        """Return the dimension score for the document in ``context``."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
