from __future__ import annotations

from pathlib import Path

import pytest

from search_relevance_prep.errors import DecodingError, InvalidRecordError, NotFoundError, SchemaError
from search_relevance_prep.ingest import iter_primary_records

HEADER = "id,product_uid,product_title,search_term,relevance\n"


def test_iter_primary_records_types_fields(primary_path: Path) -> None:
    records = list(iter_primary_records(primary_path))

    assert len(records) == 1
    record = records[0]
    assert record.id == 1
    assert record.product_uid == "100001"
    assert record.product_title == "Angle Bracket"
    assert record.search_term == "metal bracket"
    assert record.relevance == pytest.approx(2.67)


def test_iter_primary_records_preserves_file_order(write_text) -> None:
    rows = "".join(f"{idx},1000{idx:02d},Title {idx},term {idx},2\n" for idx in range(1, 6))
    path = write_text("train.csv", HEADER + rows)

    ids = [record.id for record in iter_primary_records(path)]

    assert ids == [1, 2, 3, 4, 5]


def test_iter_primary_records_addresses_columns_by_name(write_text) -> None:
    path = write_text(
        "train.csv",
        "relevance,search_term,product_title,product_uid,id,extra\n3,angle bracket,Angle Bracket,100001,7,ignored\n",
    )

    record = next(iter_primary_records(path))

    assert record.id == 7
    assert record.product_uid == "100001"
    assert record.relevance == 3.0


def test_string_relevance_is_passed_through(write_text) -> None:
    path = write_text("train.csv", HEADER + "1,100001,Angle Bracket,bracket,2.670\n2,100002,Sealant,caulk,n/a\n")

    records = list(iter_primary_records(path, relevance_kind="string"))

    assert [record.relevance for record in records] == ["2.670", "n/a"]


@pytest.mark.parametrize(
    ("row", "column"),
    [
        ("one,100001,Angle Bracket,bracket,2.67", "id"),
        ("1,100001,Angle Bracket,bracket,high", "relevance"),
        ("1,100001,Angle Bracket", "search_term"),
        ("1,  ,Angle Bracket,bracket,2.67", "product_uid"),
    ],
)
def test_invalid_rows_raise_invalid_record(write_text, row: str, column: str) -> None:
    path = write_text("train.csv", HEADER + row + "\n")

    with pytest.raises(InvalidRecordError) as excinfo:
        list(iter_primary_records(path))

    assert excinfo.value.line == 2
    assert column in str(excinfo.value)


def test_missing_primary_column_raises_schema_error(write_text) -> None:
    path = write_text("train.csv", "id,product_uid,product_title,search_term\n1,100001,Angle Bracket,bracket\n")

    with pytest.raises(SchemaError) as excinfo:
        list(iter_primary_records(path))

    assert excinfo.value.missing == ["relevance"]


def test_missing_primary_file_names_argument(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        list(iter_primary_records(tmp_path / "train.csv", argument="train_path"))

    assert excinfo.value.argument == "train_path"


def test_unknown_relevance_kind(primary_path: Path) -> None:
    with pytest.raises(ValueError):
        list(iter_primary_records(primary_path, relevance_kind="decimal"))


def test_unlabeled_file_is_accepted_when_relevance_is_optional(write_text) -> None:
    path = write_text("test.csv", "id,product_uid,product_title,search_term\n4,100001,Angle Bracket,bracket\n")

    records = list(iter_primary_records(path, require_relevance=False))

    assert [(record.id, record.relevance) for record in records] == [(4, None)]


def test_optional_relevance_is_still_parsed_when_present(primary_path: Path) -> None:
    record = next(iter_primary_records(primary_path, require_relevance=False))

    assert record.relevance == pytest.approx(2.67)


def test_long_fields_are_read(write_text) -> None:
    title = "t" * 150_000
    path = write_text("train.csv", HEADER + f"1,100001,{title},bracket,2\n")

    assert next(iter_primary_records(path)).product_title == title


def test_undecodable_primary_file_raises_decoding_error(tmp_path: Path) -> None:
    path = tmp_path / "train.csv"
    path.write_bytes(HEADER.encode("utf-8") + b"1,100001,Caf\xe9 Table,table,2\n")

    with pytest.raises(DecodingError) as excinfo:
        list(iter_primary_records(path))

    assert excinfo.value.path == path
