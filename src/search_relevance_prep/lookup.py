"""Builds the product description lookup table from its side CSV."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import closing
from pathlib import Path
from types import MappingProxyType

from .errors import DuplicateKeyError, MalformedRowError, NotFoundError, SchemaError
from .readers import iter_csv_rows, resolve_positions
from .schemas import LOOKUP_COLUMNS, PRODUCT_DESCRIPTION_COLUMN, PRODUCT_UID_COLUMN

logger = logging.getLogger("search_relevance_prep.lookup")


def build_lookup(path: Path | str, *, encoding: str = "utf-8") -> Mapping[str, str]:
    """Return a read-only ``product_uid -> product_description`` mapping.

    Rows are parsed one at a time; keys must be unique and every description must be
    non-empty once trimmed. Descriptions are stored trimmed.
    """

    source = Path(path)
    if not source.is_file():
        raise NotFoundError(source, "lookup_path")

    descriptions: dict[str, str] = {}
    with closing(iter_csv_rows(source, encoding=encoding)) as rows:
        first = next(rows, None)
        if first is None:
            raise SchemaError(source)
        positions = resolve_positions(source, first[1], [spec.name for spec in LOOKUP_COLUMNS])
        key_at = positions[PRODUCT_UID_COLUMN]
        value_at = positions[PRODUCT_DESCRIPTION_COLUMN]

        for line, row in rows:
            if not row:
                continue
            key = row[key_at] if key_at < len(row) else None
            raw_value = row[value_at] if value_at < len(row) else None
            value = raw_value.strip() if raw_value is not None else ""

            if not key or not key.strip() or not value:
                raise MalformedRowError(key, raw_value, line)
            if key in descriptions:
                raise DuplicateKeyError(key, line)
            descriptions[key] = value

    logger.info("lookup=%s entries=%d", source, len(descriptions))
    return MappingProxyType(descriptions)
