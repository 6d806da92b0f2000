from __future__ import annotations

import re
import unicodedata

WHITESPACE_RE = re.compile(r"\s+")
CAPITALIZED_NAME_RE = re.compile(r"^[A-Z][a-z]{2,}$")


def normalize_keyword(value: object) -> str:
    """Normalize a keyword or phrase so tables and text compare consistently."""
    if not isinstance(value, str):
        value = str(value)
    normalized = unicodedata.normalize("NFKC", value)
    normalized = normalized.lower()
    normalized = WHITESPACE_RE.sub(" ", normalized)
    return normalized.strip()


def is_phrase(keyword: str) -> bool:
    return " " in keyword


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def recurring_capitalized_words(words: list[str], min_count: int = 2) -> list[str]:
    """Return capitalized words of four or more letters seen at least min_count times."""
    counts: dict[str, int] = {}
    for word in words:
        if CAPITALIZED_NAME_RE.match(word) and len(word) > 3:
            counts[word] = counts.get(word, 0) + 1
    return [word for word, count in counts.items() if count >= min_count]


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    return max(lower, min(upper, value))
