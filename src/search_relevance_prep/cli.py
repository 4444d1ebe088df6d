"""Typer CLI for preparing enriched search relevance datasets locally."""

from __future__ import annotations

import codecs
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import typer

from .config import config
from .demo_utils import generate_synthetic_dataset
from .errors import DataPreparationError
from .lookup import build_lookup
from .pipeline import EnrichmentPipeline, build_pipeline
from .schemas import PreparationReport

T = TypeVar("T")

app = typer.Typer(help="Join product descriptions onto search relevance datasets.")


@app.callback()
def main(
    log_level: str = typer.Option(
        config.log_level,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Configure logging for every command."""

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level '{log_level}'.", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def prepare(
    primary_path: Path = typer.Argument(..., help="Primary dataset CSV (id, product_uid, product_title, search_term, relevance)."),
    lookup_path: Path = typer.Argument(..., help="Product descriptions CSV (product_uid, product_description)."),
    output_path: Path = typer.Argument(..., help="Destination for the enriched CSV (written without a header)."),
    relevance_kind: str = typer.Option(
        config.relevance_kind,
        "--relevance-kind",
        help="Parse relevance as 'float' or pass it through as 'string'.",
    ),
    layout: str = typer.Option(
        config.output_layout,
        "--layout",
        help="Output columns: 'full' or 'pair' (search_term, product_description, relevance).",
    ),
    encoding: str = typer.Option(config.encoding, "--encoding", help="Text encoding for inputs and outputs."),
) -> None:
    """Enrich a single dataset with product descriptions."""

    pipeline = _build(relevance_kind, layout, encoding)
    report = _guard(lambda: pipeline.run(primary_path, lookup_path, output_path))
    _echo_report(report)


@app.command("prepare-pair")
def prepare_pair(
    train_path: Path = typer.Argument(..., help="Training dataset CSV."),
    test_path: Path = typer.Argument(..., help="Test dataset CSV; the relevance column may be omitted."),
    lookup_path: Path = typer.Argument(..., help="Product descriptions CSV shared by both datasets."),
    train_output_path: Path = typer.Argument(..., help="Destination for the enriched training CSV."),
    test_output_path: Path = typer.Argument(..., help="Destination for the enriched test CSV."),
    relevance_kind: str = typer.Option(
        config.relevance_kind,
        "--relevance-kind",
        help="Parse relevance as 'float' or pass it through as 'string'.",
    ),
    layout: str = typer.Option(
        config.output_layout,
        "--layout",
        help="Output columns: 'full' or 'pair' (search_term, product_description, relevance).",
    ),
    encoding: str = typer.Option(config.encoding, "--encoding", help="Text encoding for inputs and outputs."),
) -> None:
    """Enrich a train/test pair against one shared lookup table."""

    if train_output_path.resolve() == test_output_path.resolve():
        raise typer.BadParameter("must differ from TRAIN_OUTPUT_PATH.", param_hint="TEST_OUTPUT_PATH")
    pipeline = _build(relevance_kind, layout, encoding)
    reports = _guard(
        lambda: pipeline.run_paired(train_path, test_path, lookup_path, train_output_path, test_output_path)
    )
    for report in reports:
        _echo_report(report)


@app.command("check-lookup")
def check_lookup(
    lookup_path: Path = typer.Argument(..., help="Product descriptions CSV to validate."),
    encoding: str = typer.Option(config.encoding, "--encoding", help="Text encoding of the lookup file."),
) -> None:
    """Validate a product descriptions file without writing any output."""

    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise typer.BadParameter(str(exc), param_hint="--encoding") from exc
    lookup = _guard(lambda: build_lookup(lookup_path, encoding=encoding))
    typer.echo(f"Lookup OK: {len(lookup)} product description(s) in {lookup_path}")


@app.command()
def demo(
    n: int = typer.Option(25, "--n", min=1, help="Number of synthetic search rows to generate."),
    output_dir: Path = typer.Option(
        config.demo_dir,
        "--output-dir",
        help="Directory where demo inputs and outputs will be written.",
    ),
    seed: int = typer.Option(42, "--seed", help="Random seed for the synthetic dataset."),
) -> None:
    """Generate a synthetic dataset and run the paired pipeline over it."""

    dataset = generate_synthetic_dataset(n, output_dir, seed=seed)
    pipeline = _build(config.relevance_kind, config.output_layout, "utf-8")
    reports = _guard(
        lambda: pipeline.run_paired(
            dataset.train_path,
            dataset.test_path,
            dataset.descriptions_path,
            output_dir / "train_enriched.csv",
            output_dir / "test_enriched.csv",
        )
    )

    summary = [f"Demo inputs → {output_dir}"]
    summary.extend(f"Wrote {report.rows_written} row(s) → {report.output_path}" for report in reports)
    typer.echo("\n".join(summary))


def _build(relevance_kind: str, layout: str, encoding: str) -> EnrichmentPipeline:
    try:
        codecs.lookup(encoding)
        return build_pipeline(config, relevance_kind=relevance_kind.lower(), layout=layout.lower(), encoding=encoding)
    except (LookupError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _guard(action: Callable[[], T]) -> T:
    try:
        return action()
    except DataPreparationError as exc:
        typer.echo(f"Error ({exc.error_type}): {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _echo_report(report: PreparationReport) -> None:
    typer.echo(f"Wrote {report.rows_written} row(s) → {report.output_path}")


if __name__ == "__main__":
    app()
