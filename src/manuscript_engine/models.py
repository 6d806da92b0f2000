from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

PresenceLevel = Literal["absent", "weak", "moderate", "strong"]
BalanceLevel = Literal[
    "excellent", "good", "needs-adjustment", "unbalanced", "visual-heavy", "needs-variety"
]


@dataclass(frozen=True, slots=True)
class Token:
    """A whitespace-delimited word and its inclusive-exclusive character offsets."""

    text: str
    start_char: int
    end_char: int


@dataclass(frozen=True, slots=True)
class Sentence:
    """Text between sentence-ending punctuation runs."""

    text: str
    start_char: int
    end_char: int
    word_count: int


@dataclass(frozen=True, slots=True)
class Paragraph:
    """A blank-line delimited block of text."""

    index: int
    text: str
    start_char: int
    end_char: int
    word_count: int


@dataclass(frozen=True, slots=True)
class Document:
    """Segmented manuscript text. Built once per analysis and never mutated."""

    text: str
    words: tuple[Token, ...]
    sentences: tuple[Sentence, ...]
    paragraphs: tuple[Paragraph, ...]

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def sentence_count(self) -> int:
        return len(self.sentences)

    @property
    def is_empty(self) -> bool:
        return not self.words

    def word_texts(self) -> list[str]:
        return [token.text for token in self.words]


@dataclass(frozen=True, slots=True)
class MatchOccurrence:
    """A single keyword hit for a named cluster."""

    cluster: str
    keyword: str
    char_offset: int


@dataclass(frozen=True, slots=True)
class Window:
    """A fixed-size slice of the word stream and its classification."""

    index: int
    start_word: int
    end_word: int
    start_char: int
    end_char: int
    label: str
    intensity: int
    indicators: tuple[str, ...] = ()

    @property
    def word_count(self) -> int:
        return self.end_word - self.start_word


@dataclass(frozen=True, slots=True)
class DimensionScore:
    """Score for one independently analyzed dimension of manuscript quality."""

    name: str
    score: float
    presence: PresenceLevel
    details: tuple[str, ...] = ()
    insights: tuple[str, ...] = ()
    metrics: Mapping[str, float] = field(default_factory=dict)
    components: tuple["DimensionScore", ...] = ()
    balance: BalanceLevel | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the stable JSON-serializable shape of the score."""
        return {
            "dimension": self.name,
            "score": self.score,
            "presence": self.presence,
            "balance": self.balance,
            "details": list(self.details),
            "insights": list(self.insights),
            "metrics": dict(self.metrics),
            "components": [component.to_dict() for component in self.components],
        }


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Aggregated result of a manuscript analysis."""

    dimension_scores: tuple[DimensionScore, ...]
    overall_score: float
    balance_score: float
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    recommendations: tuple[str, ...]
    variant: str = "full"

    def dimension(self, name: str) -> DimensionScore:
        for score in self.dimension_scores:
            if score.name == name:
                return score
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant": self.variant,
            "overall_score": self.overall_score,
            "balance_score": self.balance_score,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "recommendations": list(self.recommendations),
            "dimensions": [score.to_dict() for score in self.dimension_scores],
        }
