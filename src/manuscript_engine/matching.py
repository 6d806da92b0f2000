from __future__ import annotations

import re
from bisect import bisect_left
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Sequence

from .clusters import ClusterTable, KeywordCluster
from .models import MatchOccurrence
from .textutils import is_phrase, normalize_keyword


@lru_cache(maxsize=4096)
def keyword_pattern(keyword: str, stem: bool = False) -> re.Pattern[str]:
    """
    Compile the pattern for a single keyword.

    Single words use a word boundary on both sides (``\\bkeyword\\b``), or a
    bounded suffix (``\\bkeyword\\w*\\b``) in stem mode. Phrases match as
    literal substrings with any run of whitespace between their words.
    """
    normalized = normalize_keyword(keyword)
    if is_phrase(normalized):
        body = r"\s+".join(re.escape(part) for part in normalized.split(" "))
        return re.compile(body, re.IGNORECASE)
    suffix = r"\w*" if stem else ""
    return re.compile(rf"\b{re.escape(normalized)}{suffix}\b", re.IGNORECASE)


def match_cluster(
    text: str, cluster: KeywordCluster, stem: bool | None = None
) -> List[MatchOccurrence]:
    use_stem = cluster.stem if stem is None else stem
    hits: List[MatchOccurrence] = []
    for keyword in cluster.keywords:
        for found in keyword_pattern(keyword, use_stem).finditer(text):
            hits.append(
                MatchOccurrence(cluster=cluster.name, keyword=keyword, char_offset=found.start())
            )
    hits.sort(key=lambda hit: hit.char_offset)
    return hits


def match(
    text: str,
    clusters: Iterable[KeywordCluster],
    stem: bool | None = None,
) -> Dict[str, List[MatchOccurrence]]:
    """
    Match text against named clusters, case-insensitively.

    Every cluster is present in the result, ordered by offset. ``stem``
    forces whole-word (False) or bounded-suffix (True) matching for every
    cluster; ``None`` uses each cluster's own mode.
    """
    return {cluster.name: match_cluster(text, cluster, stem) for cluster in clusters}


class OccurrenceIndex:
    """Every cluster occurrence in one document, computed by a single matcher pass."""

    def __init__(
        self,
        table: ClusterTable,
        occurrences: Mapping[str, Sequence[MatchOccurrence]],
    ) -> None:
        self.table = table
        self._hits = {name: tuple(hits) for name, hits in occurrences.items()}
        self._offsets = {
            name: [hit.char_offset for hit in hits] for name, hits in self._hits.items()
        }

    @classmethod
    def build(cls, text: str, table: ClusterTable) -> "OccurrenceIndex":
        return cls(table, match(text, table))

    def occurrences(self, cluster: str) -> tuple[MatchOccurrence, ...]:
        return self._hits.get(cluster, ())

    def count(self, cluster: str) -> int:
        return len(self._hits.get(cluster, ()))

    def group_counts(self, group: str) -> Dict[str, int]:
        """Hit counts for every cluster in ``group``, in table order."""
        return {cluster.name: self.count(cluster.name) for cluster in self.table.group(group)}

    def group_total(self, group: str) -> int:
        return sum(self.group_counts(group).values())

    def in_range(self, cluster: str, start: int, end: int) -> tuple[MatchOccurrence, ...]:
        """Occurrences whose offset falls in ``[start, end)``."""
        offsets = self._offsets.get(cluster)
        if not offsets:
            return ()
        lo = bisect_left(offsets, start)
        hi = bisect_left(offsets, end)
        return self._hits[cluster][lo:hi]

    def count_in_range(self, cluster: str, start: int, end: int) -> int:
        return len(self.in_range(cluster, start, end))

    def keyword_counts(self, cluster: str) -> Dict[str, int]:
        """Per-keyword hit counts in order of first appearance."""
        counts: Dict[str, int] = {}
        for hit in self.occurrences(cluster):
            counts[hit.keyword] = counts.get(hit.keyword, 0) + 1
        return counts

    def distinct_keywords(self, cluster: str) -> List[str]:
        return list(self.keyword_counts(cluster))
