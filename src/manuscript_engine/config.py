from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping

import yaml

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EngineConfig:
    """Configuration options for the manuscript analysis pipeline."""

    window_size: int = 1000
    genre: str = "general"
    scene_intensity_step: int = 10
    sequel_intensity_step: int = 8
    tie_label: str = "sequel"
    conflict_chunk_chars: int = 2000
    action_word_span: int = 10
    recommendation_cap: int = 5
    max_workers: int = 4
    clusters_path: str | None = None
    dimension_weights: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.window_size = max(1, int(self.window_size))
        self.max_workers = max(1, int(self.max_workers))
        self.conflict_chunk_chars = max(1, int(self.conflict_chunk_chars))

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(EngineConfig)}
    unknown = sorted(str(key) for key in data if key not in allowed)
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
    kwargs = {key: data[key] for key in data if key in allowed}
    if "dimension_weights" in kwargs:
        weights = kwargs["dimension_weights"] or {}
        if not isinstance(weights, Mapping):
            raise ValueError("dimension_weights must be a mapping of dimension names.")
        kwargs["dimension_weights"] = {str(k): float(v) for k, v in weights.items()}
    if kwargs.get("clusters_path") is not None:
        kwargs["clusters_path"] = str(kwargs["clusters_path"])
    return kwargs


def config_from_dict(
    data: Mapping[str, Any] | None, **overrides: Any
) -> EngineConfig:
    """
    Build an EngineConfig from a mapping, then apply keyword overrides.

    Unknown keys are logged and ignored. Overrides whose value is None are
    skipped so optional CLI flags can be passed straight through.
    """
    merged: dict[str, Any] = dict(data or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return EngineConfig(**_build_kwargs(merged))


def config_from_yaml(path: str | Path, **overrides: Any) -> EngineConfig:
    """
    Load configuration from a YAML file.

    A relative ``clusters_path`` is resolved against the directory holding
    the YAML file, so a config and its keyword table can travel together.
    """
    source = Path(path)
    parsed = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError(f"Configuration YAML {source} must define a mapping.")
    clusters_path = parsed.get("clusters_path")
    if clusters_path and not Path(clusters_path).is_absolute():
        parsed["clusters_path"] = str(source.parent / clusters_path)
    return config_from_dict(parsed, **overrides)


def load_config(path: str | Path | None = None, **overrides: Any) -> EngineConfig:
    """Load YAML configuration when a path is given, else defaults, then apply overrides."""
    if path is None:
        return config_from_dict(None, **overrides)
    return config_from_yaml(path, **overrides)
