from __future__ import annotations

from types import MappingProxyType

import pytest

from search_relevance_prep.enrich import enrich, enrich_records
from search_relevance_prep.errors import JoinIntegrityError
from search_relevance_prep.schemas import PrimaryRecord

LOOKUP = MappingProxyType({"100001": "Durable metal bracket", "100002": "Weatherproof sealant", "100004": "   "})


def _record(record_id: int, product_uid: str) -> PrimaryRecord:
    return PrimaryRecord(
        id=record_id,
        product_uid=product_uid,
        product_title="Angle Bracket",
        search_term="metal bracket",
        relevance=2.67,
    )


def test_enrich_attaches_description() -> None:
    record = _record(1, "100001")

    enriched = enrich(record, LOOKUP)

    assert enriched.product_description == "Durable metal bracket"
    assert enriched.model_dump(exclude={"product_description"}) == record.model_dump()


def test_enrich_missing_key_raises() -> None:
    with pytest.raises(JoinIntegrityError) as excinfo:
        enrich(_record(1, "100003"), LOOKUP)

    assert excinfo.value.product_uid == "100003"
    assert "100003" in str(excinfo.value)


def test_enrich_blank_description_raises() -> None:
    with pytest.raises(JoinIntegrityError):
        enrich(_record(1, "100004"), LOOKUP)


def test_enrich_records_is_lazy_and_ordered() -> None:
    records = [_record(1, "100002"), _record(2, "100001"), _record(3, "100003")]

    stream = enrich_records(records, LOOKUP)

    assert next(stream).product_description == "Weatherproof sealant"
    assert next(stream).id == 2
    with pytest.raises(JoinIntegrityError):
        next(stream)
