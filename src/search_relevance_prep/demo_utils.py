"""Helpers for generating deterministic demo datasets."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from random import Random

from .schemas import LOOKUP_COLUMNS, PRIMARY_COLUMNS

_ITEMS = ["Angle Bracket", "Wood Screw", "Deck Stain", "Ceiling Fan", "Door Hinge", "Garden Hose"]
_MATERIALS = ["Galvanized", "Stainless", "Cedar", "Brass", "Vinyl"]
_FEATURES = [
    "weatherproof finish",
    "pre-drilled holes",
    'fits 1/2" fittings',
    "rated for outdoor use",
    "includes mounting hardware, screws and anchors",
]
_RELEVANCE_GRADES = [1.0, 1.33, 1.67, 2.0, 2.33, 2.67, 3.0]


@dataclass(frozen=True)
class DemoDataset:
    """Locations of a generated train/test/description triple."""

    train_path: Path
    test_path: Path
    descriptions_path: Path


def generate_synthetic_dataset(
    count: int,
    output_dir: Path,
    *,
    seed: int = 42,
    test_fraction: float = 0.2,
) -> DemoDataset:
    """Write deterministic primary and description CSVs under ``output_dir``."""

    rng = Random(seed)
    output_dir.mkdir(parents=True, exist_ok=True)
    product_count = max(1, count // 2)
    products = [_build_product(rng, 100001 + idx) for idx in range(product_count)]

    rows: list[list[str]] = []
    for idx in range(count):
        uid, title, _ = products[idx % product_count]
        search_term = " ".join(rng.sample(title.lower().split(), k=min(2, len(title.split()))))
        relevance = _pick(rng, _RELEVANCE_GRADES)
        rows.append([str(idx + 1), uid, title, search_term, f"{relevance:g}"])

    split = len(rows) - int(len(rows) * test_fraction)
    dataset = DemoDataset(
        train_path=output_dir / "train.csv",
        test_path=output_dir / "test.csv",
        descriptions_path=output_dir / "product_descriptions.csv",
    )
    primary_header = [spec.name for spec in PRIMARY_COLUMNS]
    _write_csv(dataset.train_path, primary_header, rows[:split])
    _write_csv(dataset.test_path, primary_header, rows[split:])
    _write_csv(
        dataset.descriptions_path,
        [spec.name for spec in LOOKUP_COLUMNS],
        [[uid, description] for uid, _, description in products],
    )
    return dataset


def _build_product(rng: Random, uid: int) -> tuple[str, str, str]:
    material = _pick(rng, _MATERIALS)
    item = _pick(rng, _ITEMS)
    title = f"{material} {item}"
    features = rng.sample(_FEATURES, k=2)
    description = f"{title} with {features[0]}.\n{features[1].capitalize()}."
    return str(uid), title, description


def _write_csv(path: Path, header: list[str], rows: list[list[str]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerow(header)
        writer.writerows(rows)


def _pick(rng: Random, items: list):
    return rng.choice(items)
