from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, List, Mapping, Sequence

from .analyzers import AnalysisContext, DimensionAnalyzer, default_analyzers
from .analyzers.dialogue import resolve_genre
from .clusters import ClusterTable, default_cluster_table, load_cluster_table
from .config import EngineConfig
from .errors import AnalyzerFailure, InputDecodingError
from .matching import OccurrenceIndex
from .models import AnalysisReport, DimensionScore, Document
from .recommendations import synthesize_recommendations
from .scoring import MODERATE_THRESHOLD, balance_score, overall_score, strengths, weaknesses
from .tokenization import build_document
from .windowing import classify_windows

logger = logging.getLogger(__name__)


def decode_text(text: str | bytes) -> str:
    """Return ``text`` as str, decoding bytes as UTF-8."""
    if isinstance(text, bytes):
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InputDecodingError(f"Input is not valid UTF-8: {exc}") from exc
    return text


def resolve_clusters(config: EngineConfig, clusters: ClusterTable | None = None) -> ClusterTable:
    if clusters is not None:
        return clusters
    if config.clusters_path:
        return load_cluster_table(config.clusters_path)
    return default_cluster_table()


def build_context(
    document: Document,
    table: ClusterTable,
    config: EngineConfig,
    **extra: Any,
) -> AnalysisContext:
    """Run the shared matcher pass and window classification once for a document."""
    index = OccurrenceIndex.build(document.text, table)
    windows = classify_windows(
        document,
        index,
        [cluster.name for cluster in table.group("scene")],
        [cluster.name for cluster in table.group("sequel")],
        window_size=config.window_size,
        positive_step=config.scene_intensity_step,
        negative_step=config.sequel_intensity_step,
        tie_label=config.tie_label,
    )
    return AnalysisContext(
        document=document,
        index=index,
        config=config,
        windows=tuple(windows),
        genre=resolve_genre(config.genre),
        **extra,
    )


def _run_one(analyzer: DimensionAnalyzer, context: AnalysisContext) -> DimensionScore:
    started = time.perf_counter()
    try:
        score = analyzer.analyze(context)
    except Exception as exc:
        raise AnalyzerFailure(analyzer.name, exc) from exc
    logger.debug(
        "Analyzer %s scored %.2f in %.1f ms",
        analyzer.name,
        score.score,
        (time.perf_counter() - started) * 1000,
    )
    return score


def run_analyzers(
    analyzers: Sequence[DimensionAnalyzer],
    context: AnalysisContext,
    max_workers: int = 1,
) -> List[DimensionScore]:
    """
    Run every analyzer against the shared context and return scores in
    analyzer order.

    With more than one worker the analyzers fan out over a thread pool. The
    first failure, in analyzer order, is raised as AnalyzerFailure and no
    partial result is returned.
    """
    if max_workers <= 1 or len(analyzers) <= 1:
        return [_run_one(analyzer, context) for analyzer in analyzers]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(analyzers))) as executor:
        futures = [executor.submit(_run_one, analyzer, context) for analyzer in analyzers]
        return [future.result() for future in futures]


def aggregate(
    scores: Sequence[DimensionScore],
    config: EngineConfig,
    *,
    weights: Mapping[str, float] | None = None,
    variant: str = "full",
    weak_threshold: float = MODERATE_THRESHOLD,
) -> AnalysisReport:
    """Fan the dimension scores back in to a single report."""
    balance = balance_score(scores)
    return AnalysisReport(
        dimension_scores=tuple(scores),
        overall_score=overall_score(scores, weights),
        balance_score=balance,
        strengths=tuple(strengths(scores)),
        weaknesses=tuple(weaknesses(scores, threshold=weak_threshold)),
        recommendations=tuple(
            synthesize_recommendations(
                scores,
                balance,
                cap=config.recommendation_cap,
                weak_threshold=weak_threshold,
            )
        ),
        variant=variant,
    )


def analyze(
    text: str | bytes,
    *,
    genre: str | None = None,
    window_size: int | None = None,
    config: EngineConfig | None = None,
    clusters: ClusterTable | None = None,
    analyzers: Sequence[DimensionAnalyzer] | None = None,
) -> AnalysisReport:
    """
    Analyze manuscript text and return the full multi-dimension report.

    ``genre`` and ``window_size`` override the matching config fields.
    Degenerate input yields a valid report with floor scores; an unexpected
    fault inside an analyzer raises AnalyzerFailure.
    """
    config = config or EngineConfig()
    overrides = {}
    if genre is not None:
        overrides["genre"] = genre
    if window_size is not None:
        overrides["window_size"] = window_size
    if overrides:
        config = replace(config, **overrides)

    started = time.perf_counter()
    document = build_document(decode_text(text))
    logger.info(
        "Analyzing manuscript: %d words, %d sentences, %d paragraphs",
        document.word_count,
        document.sentence_count,
        len(document.paragraphs),
    )
    table = resolve_clusters(config, clusters)
    context = build_context(document, table, config)
    scores = run_analyzers(
        list(analyzers) if analyzers is not None else default_analyzers(),
        context,
        config.max_workers,
    )
    report = aggregate(scores, config, weights=config.dimension_weights or None)
    logger.info(
        "Analysis finished in %.1f ms: overall %.2f, balance %.2f",
        (time.perf_counter() - started) * 1000,
        report.overall_score,
        report.balance_score,
    )
    return report
