#!/usr/bin/env python
"""Local benchmark for the enrichment pipeline over synthetic train/test data."""

from __future__ import annotations

import argparse
import json
import math
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import List

from search_relevance_prep.config import config
from search_relevance_prep.demo_utils import generate_synthetic_dataset
from search_relevance_prep.pipeline import build_pipeline


def percentile(values: List[float], pct: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    if len(ordered) == 1:
        return ordered[0]
    position = pct * (len(ordered) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[int(position)]
    weight = position - lower
    return ordered[lower] * (1 - weight) + ordered[upper] * weight


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark the search relevance data preparation pipeline.")
    parser.add_argument("--n", type=int, default=10_000, help="Number of synthetic search rows to generate.")
    parser.add_argument("--repeat", type=int, default=5, help="Number of timed pipeline runs.")
    parser.add_argument("--layout", choices=["full", "pair"], default=config.output_layout, help="Output layout.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("outputs/benchmarks/benchmark.json"),
        help="Path where benchmark metrics JSON will be written.",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed for synthetic generation.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    output_path = args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data_dir = output_path.parent / "data"

    generate_start = perf_counter()
    dataset = generate_synthetic_dataset(args.n, data_dir, seed=args.seed)
    generate_ms = (perf_counter() - generate_start) * 1000

    pipeline = build_pipeline(config, layout=args.layout)
    run_ms: list[float] = []
    lookup_ms: list[float] = []
    enrich_ms: list[float] = []
    rows_written = 0

    for _ in range(max(1, args.repeat)):
        start = perf_counter()
        reports = pipeline.run_paired(
            dataset.train_path,
            dataset.test_path,
            dataset.descriptions_path,
            data_dir / "train_enriched.csv",
            data_dir / "test_enriched.csv",
        )
        run_ms.append((perf_counter() - start) * 1000)
        lookup_ms.append(reports[0].lookup_ms)
        enrich_ms.append(sum(report.enrich_ms for report in reports))
        rows_written = sum(report.rows_written for report in reports)

    avg_ms = sum(run_ms) / len(run_ms)
    p50 = percentile(run_ms, 0.5)
    p95 = percentile(run_ms, 0.95)

    payload = {
        "rows_requested": args.n,
        "rows_written": rows_written,
        "layout": args.layout,
        "runs": len(run_ms),
        "per_run_ms": {"avg": avg_ms, "p50": p50, "p95": p95},
        "breakdown_ms": {
            "lookup_ms": sum(lookup_ms) / len(lookup_ms),
            "enrich_ms": sum(enrich_ms) / len(enrich_ms),
        },
        "generate_ms": generate_ms,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    print(f"Benchmark complete → {output_path}")
    print(
        f"Per-run avg={avg_ms:.2f}ms p50={p50:.2f}ms p95={p95:.2f}ms | "
        f"Breakdown lookup={payload['breakdown_ms']['lookup_ms']:.2f}ms "
        f"enrich={payload['breakdown_ms']['enrich_ms']:.2f}ms"
    )


if __name__ == "__main__":
    main()
