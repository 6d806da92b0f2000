from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

import typer
import yaml

from .clusters import load_cluster_table
from .config import EngineConfig, load_config
from .errors import ManuscriptEngineError
from .markup import markup_to_text
from .pipeline import analyze as analyze_text
from .pipeline import decode_text
from .tier import analyze_tier

app = typer.Typer(help="Manuscript quality analysis CLI.", no_args_is_help=True)

SUPPORTED_INPUT_EXTENSIONS = {".txt", ".md", ".html", ".htm"}
MARKUP_EXTENSIONS = {".html", ".htm"}


@app.command()
def analyze(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    genre: str | None = typer.Option(
        None, "--genre", "-g", help="Genre profile for dialogue targets (e.g., 'thriller')."
    ),
    window_size: int | None = typer.Option(
        None, "--window-size", help="Words per scene/sequel window."
    ),
    max_workers: int | None = typer.Option(
        None, "--max-workers", help="Parallel analyzers (1 = sequential)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Analyze manuscripts and emit a JSON report per document."""
    _configure_logging(verbose)
    cfg = load_config(
        config, genre=genre, window_size=window_size, max_workers=max_workers
    )
    results: List[Dict[str, Any]] = []
    for doc_id, path in _collect_inputs(input_path):
        text, _ = _read_input(path)
        try:
            report = analyze_text(text, config=cfg)
        except ManuscriptEngineError as exc:
            typer.echo(f"Analysis failed for {doc_id}: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        results.append({"doc_id": doc_id, "report": report.to_dict()})
    typer.echo(json.dumps({"documents": results}, indent=2))


@app.command()
def tier(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    markup_path: Path | None = typer.Option(
        None,
        "--markup-path",
        exists=True,
        readable=True,
        dir_okay=False,
        help="Rendered HTML to scan for visual opportunities.",
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Score spacing and dual coding for a single document."""
    _configure_logging(verbose)
    cfg = load_config(config)
    text, markup = _read_input(input_path)
    if markup_path is not None:
        markup = decode_text(markup_path.read_bytes())
    try:
        report = analyze_tier(text, markup=markup, config=cfg)
    except ManuscriptEngineError as exc:
        typer.echo(f"Tier analysis failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps({"doc_id": input_path.name, "report": report.to_dict()}, indent=2))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = EngineConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


@app.command("list-clusters")
def list_clusters(
    group: str | None = typer.Option(None, "--group", help="Only show one cluster group."),
    clusters_path: Path | None = typer.Option(
        None, "--clusters-path", exists=True, readable=True, dir_okay=False
    ),
) -> None:
    """Print the active keyword table as YAML."""
    table = load_cluster_table(clusters_path)
    data = table.to_dict()
    if group is not None:
        if group not in table.groups:
            raise typer.BadParameter(
                f"Unknown group '{group}'. Choose from: {', '.join(table.groups)}",
                param_hint="--group",
            )
        data = {group: data[group]}
    typer.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))


def main() -> None:
    app()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _collect_inputs(input_path: Path) -> List[Tuple[str, Path]]:
    """Expand the input path into (doc_id, path) pairs in a stable order."""
    if input_path.is_file():
        return [(input_path.name, input_path)]
    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    return [(str(file.relative_to(input_path)), file) for file in files]


def _read_input(path: Path) -> Tuple[str, str | None]:
    """Return (plain text, markup or None) for a supported file."""
    try:
        raw = decode_text(path.read_bytes())
    except ManuscriptEngineError as exc:
        raise typer.BadParameter(f"{path}: {exc}") from exc
    if path.suffix.lower() in MARKUP_EXTENSIONS:
        return markup_to_text(raw), raw
    return raw, None


if __name__ == "__main__":
    main()
