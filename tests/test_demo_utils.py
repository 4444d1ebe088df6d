from __future__ import annotations

import csv
from pathlib import Path

from search_relevance_prep.demo_utils import generate_synthetic_dataset
from search_relevance_prep.lookup import build_lookup


def test_generate_synthetic_dataset_is_deterministic(tmp_path: Path) -> None:
    first = generate_synthetic_dataset(20, tmp_path / "a", seed=7)
    second = generate_synthetic_dataset(20, tmp_path / "b", seed=7)

    for left, right in [
        (first.train_path, second.train_path),
        (first.test_path, second.test_path),
        (first.descriptions_path, second.descriptions_path),
    ]:
        assert left.read_bytes() == right.read_bytes()


def test_generate_synthetic_dataset_splits_rows_and_covers_lookup(tmp_path: Path) -> None:
    dataset = generate_synthetic_dataset(20, tmp_path)

    with dataset.train_path.open(encoding="utf-8", newline="") as handle:
        train_rows = list(csv.DictReader(handle))
    with dataset.test_path.open(encoding="utf-8", newline="") as handle:
        test_rows = list(csv.DictReader(handle))
    lookup = build_lookup(dataset.descriptions_path)

    assert len(train_rows) == 16
    assert len(test_rows) == 4
    assert len(lookup) == 10
    assert all(row["product_uid"] in lookup for row in train_rows + test_rows)
