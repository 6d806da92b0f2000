from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List

from ..models import DimensionScore, Document
from ..scoring import dimension_score
from .base import AnalysisContext, DimensionAnalyzer

NAME = "Readability"
WORDS_PER_MINUTE = 238
TARGET_GRADE = 8

NON_WORD_CHARS_RE = re.compile(r"[^a-zA-Z'-]")
NON_LETTER_RE = re.compile(r"[^a-z]")
SILENT_ENDING_RE = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
LEADING_Y_RE = re.compile(r"^y")
VOWEL_GROUP_RE = re.compile(r"[aeiouy]{1,2}")

READING_LEVELS = (
    (90, "5th Grade"),
    (80, "6th Grade"),
    (70, "7th Grade"),
    (60, "8th-9th Grade"),
    (50, "10th-12th Grade"),
    (30, "College"),
)


def count_syllables(word: str) -> int:
    """
    Approximate syllables with a vowel-cluster heuristic.

    This is not a dictionary lookup and miscounts many words; formula
    calibration depends on it as is.
    """
    word = NON_LETTER_RE.sub("", word.lower())
    if len(word) <= 3:
        return 1
    word = SILENT_ENDING_RE.sub("", word)
    word = LEADING_Y_RE.sub("", word)
    return max(1, len(VOWEL_GROUP_RE.findall(word)))


def reading_level(reading_ease: float) -> str:
    for threshold, label in READING_LEVELS:
        if reading_ease >= threshold:
            return label
    return "College Graduate"


def grade_interpretation(grade: float) -> str:
    if grade < 6:
        return "Elementary school level - Very easy to read"
    if grade < 9:
        return "Middle school level - Easy to read"
    if grade < 13:
        return "High school level - Standard reading level"
    if grade < 16:
        return "College level - Moderately difficult"
    return "Graduate level - Difficult to read"


@dataclass(frozen=True, slots=True)
class ReadabilityMetrics:
    words: int
    sentences: int
    syllables: int
    complex_words: int
    flesch_reading_ease: float
    flesch_kincaid_grade: float
    gunning_fog: float
    smog: float
    reading_minutes: int

    @property
    def words_per_sentence(self) -> float:
        return self.words / self.sentences

    @property
    def syllables_per_word(self) -> float:
        return self.syllables / self.words


def readable_words(document: Document) -> List[str]:
    cleaned = (NON_WORD_CHARS_RE.sub("", word) for word in document.word_texts())
    return [word for word in cleaned if word]


def compute_metrics(document: Document) -> ReadabilityMetrics | None:
    """Standard readability formulas; None when there are no words or sentences."""
    words = readable_words(document)
    sentence_count = document.sentence_count
    if not words or sentence_count == 0:
        return None
    syllable_counts = [count_syllables(word) for word in words]
    syllables = sum(syllable_counts)
    complex_words = sum(1 for count in syllable_counts if count >= 3)
    wps = len(words) / sentence_count
    spw = syllables / len(words)
    return ReadabilityMetrics(
        words=len(words),
        sentences=sentence_count,
        syllables=syllables,
        complex_words=complex_words,
        flesch_reading_ease=206.835 - 1.015 * wps - 84.6 * spw,
        flesch_kincaid_grade=0.39 * wps + 11.8 * spw - 15.59,
        gunning_fog=0.4 * (wps + complex_words / len(words) * 100),
        smog=1.043 * math.sqrt(complex_words * (30 / sentence_count)) + 3.1291,
        reading_minutes=math.ceil(len(words) / WORDS_PER_MINUTE),
    )


class ReadabilityAnalyzer(DimensionAnalyzer):
    name = NAME

    def analyze(self, context: AnalysisContext) -> DimensionScore:
        metrics = compute_metrics(context.document)
        if metrics is None:
            return dimension_score(
                NAME, 0, details=["Not enough words or sentences to measure readability."]
            )
        grade = metrics.flesch_kincaid_grade
        insights: List[str] = []
        if grade > 12:
            insights.append("Prose reads above high-school level; shorten sentences and words")
        elif grade < 4:
            insights.append("Prose reads very simply; vary sentence length and vocabulary")
        reading_time = (
            "< 1 min" if metrics.reading_minutes < 1 else f"{metrics.reading_minutes} min"
        )
        ease = metrics.flesch_reading_ease
        details = [
            f"Flesch Reading Ease {ease:.1f} ({reading_level(ease)})",
            f"Flesch-Kincaid Grade {grade:.1f}: {grade_interpretation(grade)}",
            f"Gunning Fog {metrics.gunning_fog:.1f}, SMOG {metrics.smog:.1f}",
            f"Average {metrics.words_per_sentence:.1f} words per sentence, "
            f"{metrics.syllables_per_word:.2f} syllables per word",
            f"Reading time {reading_time}",
        ]
        return dimension_score(
            NAME,
            100 - 5 * abs(grade - TARGET_GRADE),
            details=details,
            insights=insights,
            metrics={
                "flesch_reading_ease": round(metrics.flesch_reading_ease, 1),
                "flesch_kincaid_grade": round(grade, 1),
                "gunning_fog": round(metrics.gunning_fog, 1),
                "smog": round(metrics.smog, 1),
                "words_per_sentence": round(metrics.words_per_sentence, 1),
                "syllables_per_word": round(metrics.syllables_per_word, 2),
                "complex_words": metrics.complex_words,
                "reading_minutes": metrics.reading_minutes,
            },
        )
