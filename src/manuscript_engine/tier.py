from __future__ import annotations

import logging

from .analyzers import tier_analyzers
from .analyzers.dual_coding import NAME as DUAL_CODING
from .analyzers.spacing import NAME as SPACING
from .clusters import ClusterTable
from .config import EngineConfig
from .markup import extract_blocks, looks_like_markup, markup_to_text
from .models import AnalysisReport
from .pipeline import aggregate, build_context, decode_text, resolve_clusters, run_analyzers
from .tokenization import build_document

logger = logging.getLogger(__name__)

PRINCIPLE_WEIGHTS = {SPACING: 1.0, DUAL_CODING: 1.0}
TIER_WEAKNESS_THRESHOLD = 60


def analyze_tier(
    text: str | bytes | None,
    markup: str | None = None,
    config: EngineConfig | None = None,
    clusters: ClusterTable | None = None,
) -> AnalysisReport:
    """
    Score the two learning principles (spacing and dual coding).

    When ``markup`` is given its block elements are scanned for visual
    opportunities; plain text falls back to blank-line paragraphs. Missing
    ``text`` is derived from the markup, and ``text`` that is itself markup
    is treated as such.
    """
    config = config or EngineConfig()
    plain = decode_text(text) if text is not None else ""
    if markup is None and looks_like_markup(plain):
        markup, plain = plain, ""
    if not plain.strip() and markup:
        plain = markup_to_text(markup)
    document = build_document(plain.strip())
    blocks = tuple(extract_blocks(markup)) if markup and markup.strip() else ()
    logger.info(
        "Tier analysis: %d paragraphs, %d markup blocks",
        len(document.paragraphs),
        len(blocks),
    )
    context = build_context(
        document,
        resolve_clusters(config, clusters),
        config,
        blocks=blocks,
        source_text=markup if blocks else None,
    )
    scores = run_analyzers(tier_analyzers(), context, config.max_workers)
    return aggregate(
        scores,
        config,
        weights=PRINCIPLE_WEIGHTS,
        variant="tier",
        weak_threshold=TIER_WEAKNESS_THRESHOLD,
    )
