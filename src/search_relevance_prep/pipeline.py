"""Pipeline orchestration that joins product descriptions onto search datasets."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

from .config import AppConfig
from .config import config as default_config
from .enrich import enrich_records
from .flatten import flatten_enriched_record_to_row
from .ingest import ensure_exists, iter_primary_records
from .lookup import build_lookup
from .schemas import OUTPUT_LAYOUTS, RELEVANCE_KINDS, PreparationReport, output_columns
from .sinks import RowSink, StagedCSVSink

logger = logging.getLogger("search_relevance_prep.pipeline")

SinkFactory = Callable[..., RowSink]


@dataclass
class StageTimings:
    """Tracks elapsed time (ms) spent in each pipeline stage."""

    lookup_ms: float = 0.0
    enrich_ms: float = 0.0

    @property
    def total_ms(self) -> float:
        return self.lookup_ms + self.enrich_ms


@dataclass(frozen=True)
class _Stream:
    argument: str
    source: Path
    output: Path
    labeled: bool = True


class EnrichmentPipeline:
    """Builds the lookup table once and streams each primary dataset through it."""

    def __init__(
        self,
        *,
        relevance_kind: str = "float",
        layout: str = "full",
        encoding: str = "utf-8",
        sink_factory: SinkFactory = StagedCSVSink,
    ) -> None:
        if relevance_kind not in RELEVANCE_KINDS:
            raise ValueError(f"Unknown relevance kind '{relevance_kind}'. Use one of: {', '.join(RELEVANCE_KINDS)}.")
        if layout not in OUTPUT_LAYOUTS:
            raise ValueError(f"Unknown output layout '{layout}'. Use one of: {', '.join(OUTPUT_LAYOUTS)}.")
        self._relevance_kind = relevance_kind
        self._layout = layout
        self._encoding = encoding
        self._columns = output_columns(layout, relevance_kind)
        self._sink_factory = sink_factory

    def run(
        self,
        primary_path: Path | str,
        lookup_path: Path | str,
        output_path: Path | str,
    ) -> PreparationReport:
        """Enrich one dataset and write it to ``output_path``."""

        streams = [_Stream("primary_path", Path(primary_path), Path(output_path))]
        return self._run_streams(streams, lookup_path)[0]

    def run_paired(
        self,
        train_path: Path | str,
        test_path: Path | str,
        lookup_path: Path | str,
        train_output_path: Path | str,
        test_output_path: Path | str,
    ) -> list[PreparationReport]:
        """Enrich a train/test pair against one shared lookup table.

        Neither output is published unless both datasets enrich cleanly. The test file
        may omit the ``relevance`` column, in which case its label field is left empty.
        """

        if Path(train_output_path).resolve() == Path(test_output_path).resolve():
            raise ValueError("train_output_path and test_output_path must differ.")
        streams = [
            _Stream("train_path", Path(train_path), Path(train_output_path)),
            _Stream("test_path", Path(test_path), Path(test_output_path), labeled=False),
        ]
        return self._run_streams(streams, lookup_path)

    def _run_streams(self, streams: Sequence[_Stream], lookup_path: Path | str) -> list[PreparationReport]:
        for stream in streams:
            ensure_exists(stream.source, stream.argument)

        lookup_start = perf_counter()
        lookup = build_lookup(lookup_path, encoding=self._encoding)
        lookup_ms = (perf_counter() - lookup_start) * 1000

        sinks: list[RowSink] = []
        committed: list[RowSink] = []
        staged: list[tuple[_Stream, int, StageTimings]] = []
        try:
            for stream in streams:
                sink = self._sink_factory(stream.output, encoding=self._encoding)
                sinks.append(sink)
                timings = StageTimings(lookup_ms=lookup_ms)
                enrich_start = perf_counter()
                try:
                    rows = self._write_stream(stream, lookup, sink)
                finally:
                    timings.enrich_ms += (perf_counter() - enrich_start) * 1000
                staged.append((stream, rows, timings))
            for sink in sinks:
                sink.commit()
                committed.append(sink)
        except Exception:
            for sink in reversed(committed):
                sink.rollback()
            for sink in sinks:
                sink.discard()
            raise
        for sink in committed:
            sink.release()

        reports = []
        for stream, rows, timings in staged:
            report = PreparationReport(
                output_path=stream.output,
                rows_written=rows,
                layout=self._layout,
                lookup_size=len(lookup),
                lookup_ms=timings.lookup_ms,
                enrich_ms=timings.enrich_ms,
            )
            _log_report(report, timings)
            reports.append(report)
        return reports

    def _write_stream(self, stream: _Stream, lookup: Mapping[str, str], sink: RowSink) -> int:
        records = iter_primary_records(
            stream.source,
            relevance_kind=self._relevance_kind,
            encoding=self._encoding,
            argument=stream.argument,
            require_relevance=stream.labeled,
        )
        rows = (flatten_enriched_record_to_row(record, self._columns) for record in enrich_records(records, lookup))
        return sink.write_rows(rows)


def build_pipeline(cfg: AppConfig = default_config, **overrides: str | None) -> EnrichmentPipeline:
    """Return a pipeline configured from ``cfg``; keyword overrides win over config values."""

    options = {
        "relevance_kind": cfg.relevance_kind,
        "layout": cfg.output_layout,
        "encoding": cfg.encoding,
    }
    options.update({key: value for key, value in overrides.items() if value is not None})
    return EnrichmentPipeline(**options)


def prepare_dataset(
    primary_path: Path | str,
    lookup_path: Path | str,
    output_path: Path | str,
    cfg: AppConfig = default_config,
) -> PreparationReport:
    """Single dataset in, single enriched dataset out."""

    return build_pipeline(cfg).run(primary_path, lookup_path, output_path)


def prepare_train_test(
    train_path: Path | str,
    test_path: Path | str,
    lookup_path: Path | str,
    train_output_path: Path | str,
    test_output_path: Path | str,
    cfg: AppConfig = default_config,
) -> list[PreparationReport]:
    """Paired train/test preparation sharing one lookup table."""

    return build_pipeline(cfg).run_paired(train_path, test_path, lookup_path, train_output_path, test_output_path)


def _log_report(report: PreparationReport, timings: StageTimings) -> None:
    logger.info(
        "output=%s rows=%d layout=%s lookup_size=%d lookup_ms=%.2f enrich_ms=%.2f total_ms=%.2f",
        report.output_path,
        report.rows_written,
        report.layout,
        report.lookup_size,
        timings.lookup_ms,
        timings.enrich_ms,
        timings.total_ms,
    )
