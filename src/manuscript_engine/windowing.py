from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from .matching import OccurrenceIndex
from .models import Document, MatchOccurrence, Window


def window_bounds(word_count: int, window_size: int) -> List[tuple[int, int]]:
    """Return non-overlapping ``[start, end)`` word ranges covering the document."""
    size = max(1, window_size)
    return [(start, min(start + size, word_count)) for start in range(0, word_count, size)]


def _hits_in_window(
    index: OccurrenceIndex, clusters: Sequence[str], start_char: int, end_char: int
) -> List[MatchOccurrence]:
    hits: List[MatchOccurrence] = []
    for name in clusters:
        hits.extend(index.in_range(name, start_char, end_char))
    hits.sort(key=lambda hit: hit.char_offset)
    return hits


def classify_windows(
    document: Document,
    index: OccurrenceIndex,
    positive: Sequence[str],
    negative: Sequence[str],
    *,
    window_size: int,
    positive_label: str = "scene",
    negative_label: str = "sequel",
    positive_step: int = 10,
    negative_step: int = 8,
    tie_label: str | None = None,
) -> List[Window]:
    """
    Split the document into fixed-size windows and label each one by
    indicator majority.

    The label with the strictly greater indicator count wins and its
    intensity is ``min(100, count * step)``. Ties, including windows with
    no indicators at all, take ``tie_label`` (the negative label by default).
    """
    fallback = tie_label or negative_label
    steps = {positive_label: positive_step, negative_label: negative_step}
    windows: List[Window] = []
    for window_idx, (start, end) in enumerate(window_bounds(document.word_count, window_size)):
        start_char = document.words[start].start_char
        end_char = document.words[end - 1].end_char
        positive_hits = _hits_in_window(index, positive, start_char, end_char)
        negative_hits = _hits_in_window(index, negative, start_char, end_char)
        if len(positive_hits) > len(negative_hits):
            label, winning = positive_label, positive_hits
        elif len(negative_hits) > len(positive_hits):
            label, winning = negative_label, negative_hits
        else:
            winning = positive_hits if fallback == positive_label else negative_hits
            label = fallback
        intensity = min(100, len(winning) * steps.get(label, negative_step))
        indicators = tuple(dict.fromkeys(hit.keyword for hit in winning))
        windows.append(
            Window(
                index=window_idx,
                start_word=start,
                end_word=end,
                start_char=start_char,
                end_char=end_char,
                label=label,
                intensity=intensity,
                indicators=indicators,
            )
        )
    return windows


def label_counts(windows: Sequence[Window]) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for window in windows:
        counts[window.label] += 1
    return dict(counts)


def average_length_by_label(windows: Sequence[Window]) -> Dict[str, float]:
    totals: Dict[str, int] = defaultdict(int)
    counts: Dict[str, int] = defaultdict(int)
    for window in windows:
        totals[window.label] += window.word_count
        counts[window.label] += 1
    return {label: totals[label] / counts[label] for label in totals}


def density_per_thousand(occurrences: int, word_count: int) -> float:
    """Occurrences per 1,000 words; 0.0 for an empty document."""
    if word_count <= 0:
        return 0.0
    return occurrences / word_count * 1000
