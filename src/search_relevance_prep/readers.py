"""Shared CSV row reader used by the lookup builder and the primary reader."""

from __future__ import annotations

import csv
import sys
from collections.abc import Iterator
from pathlib import Path

from .errors import DecodingError, InvalidRecordError, SchemaError

# Product descriptions routinely exceed the csv module's 128 KiB default.
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


def iter_csv_rows(source: Path, *, encoding: str = "utf-8") -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line, row)`` pairs from ``source``, header row included.

    ``line`` is the physical line on which the row ends. Parse and decode failures are
    raised as ``DataPreparationError`` subclasses that name the file.
    """

    with source.open("r", encoding=encoding, newline="") as handle:
        reader = csv.reader(handle)
        try:
            for row in reader:
                yield reader.line_num, row
        except csv.Error as exc:
            raise InvalidRecordError(source, reader.line_num, f"unparseable CSV ({exc})") from exc
        except UnicodeDecodeError as exc:
            bad = exc.object[exc.start : exc.end].hex()
            raise DecodingError(source, encoding, f"invalid byte(s) 0x{bad}, {exc.reason}") from exc


def resolve_positions(
    source: Path,
    header: list[str],
    required: list[str],
    optional: tuple[str, ...] = (),
) -> dict[str, int]:
    """Map each required column name, and any optional one present, to its index in ``header``."""

    names = [name.lstrip("\ufeff").strip() for name in header]
    missing = [name for name in required if name not in names]
    if missing:
        raise SchemaError(source, missing)
    positions = {name: names.index(name) for name in required}
    positions.update({name: names.index(name) for name in optional if name in names})
    return positions
