"""Helpers that flatten enriched records into fixed-order CSV rows."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from .schemas import ColumnSpec, EnrichedRecord

DELIMITER = ","
QUOTE_CHAR = '"'
LINE_TERMINATOR = "\n"


def flatten_enriched_record_to_row(record: EnrichedRecord, columns: Iterable[ColumnSpec]) -> list[str]:
    """Convert an enriched record into encoded fields ordered by column position."""

    ordered = sorted(columns, key=lambda spec: spec.position)
    return [_encode_value(getattr(record, spec.name)) for spec in ordered]


def format_csv_row(fields: Iterable[str]) -> str:
    """Join already-encoded fields into one terminated CSV line."""

    return DELIMITER.join(fields) + LINE_TERMINATOR


def quote_text(value: str) -> str:
    """Quote ``value`` when it is empty or holds a delimiter, quote, or whitespace."""

    if value and not _needs_quoting(value):
        return value
    escaped = value.replace(QUOTE_CHAR, QUOTE_CHAR * 2)
    return f"{QUOTE_CHAR}{escaped}{QUOTE_CHAR}"


def format_number(value: float) -> str:
    """Render ``value`` with the shortest representation that round-trips."""

    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def _encode_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_number(value)
    return quote_text(str(value))


def _needs_quoting(value: str) -> bool:
    return DELIMITER in value or QUOTE_CHAR in value or any(char.isspace() for char in value)
