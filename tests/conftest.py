from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

PRIMARY_HEADER = "id,product_uid,product_title,search_term,relevance\n"
LOOKUP_HEADER = "product_uid,product_description\n"

EXAMPLE_LOOKUP = LOOKUP_HEADER + '100001,"Durable metal bracket"\n100002,"Weatherproof sealant"\n'
EXAMPLE_PRIMARY = PRIMARY_HEADER + '1,100001,"Angle Bracket","metal bracket",2.67\n'
EXAMPLE_OUTPUT = '1,100001,"Angle Bracket","metal bracket",2.67,"Durable metal bracket"\n'


@pytest.fixture()
def write_text(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        target = tmp_path / name
        target.write_text(content, encoding="utf-8", newline="")
        return target

    return _write


@pytest.fixture()
def lookup_path(write_text: Callable[[str, str], Path]) -> Path:
    return write_text("product_descriptions.csv", EXAMPLE_LOOKUP)


@pytest.fixture()
def primary_path(write_text: Callable[[str, str], Path]) -> Path:
    return write_text("train.csv", EXAMPLE_PRIMARY)


@pytest.fixture()
def expected_example_row() -> str:
    return EXAMPLE_OUTPUT
