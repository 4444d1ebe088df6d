"""Joins product descriptions onto primary records."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .errors import JoinIntegrityError
from .schemas import EnrichedRecord, PrimaryRecord


def enrich(record: PrimaryRecord, lookup: Mapping[str, str]) -> EnrichedRecord:
    """Return ``record`` with its product description attached.

    Raises JoinIntegrityError when the product_uid is absent or maps to blank text;
    a missing description is never defaulted.
    """

    description = lookup.get(record.product_uid)
    if description is None or not description.strip():
        raise JoinIntegrityError(record.product_uid)

    return EnrichedRecord(
        **record.model_dump(),
        product_description=description,
    )


def enrich_records(records: Iterable[PrimaryRecord], lookup: Mapping[str, str]) -> Iterator[EnrichedRecord]:
    """Lazily enrich ``records`` in input order."""

    for record in records:
        yield enrich(record, lookup)
