"""
manuscript_engine package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .clusters import ClusterTable, KeywordCluster, default_cluster_table, load_cluster_table
from .config import EngineConfig, config_from_dict, config_from_yaml, load_config
from .errors import AnalyzerFailure, InputDecodingError, ManuscriptEngineError
from .models import AnalysisReport, DimensionScore
from .pipeline import analyze
from .tier import analyze_tier
from .tokenization import build_document

__all__ = [
    "AnalysisReport",
    "AnalyzerFailure",
    "ClusterTable",
    "DimensionScore",
    "EngineConfig",
    "InputDecodingError",
    "KeywordCluster",
    "ManuscriptEngineError",
    "analyze",
    "analyze_tier",
    "build_document",
    "config_from_dict",
    "config_from_yaml",
    "default_cluster_table",
    "load_cluster_table",
    "load_config",
]

__version__ = "0.1.0"
