"""Streaming reader for the primary search/product dataset."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import closing
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import InvalidRecordError, NotFoundError, SchemaError
from .readers import iter_csv_rows, resolve_positions
from .schemas import PRIMARY_COLUMNS, RELEVANCE_COLUMN, RELEVANCE_KINDS, ColumnSpec, PrimaryRecord


def ensure_exists(path: Path | str, argument: str) -> Path:
    """Return ``path`` as a Path, raising NotFoundError when it is not a file."""

    source = Path(path)
    if not source.is_file():
        raise NotFoundError(source, argument)
    return source


def iter_primary_records(
    path: Path | str,
    *,
    relevance_kind: str = "float",
    encoding: str = "utf-8",
    argument: str = "primary_path",
    require_relevance: bool = True,
) -> Iterator[PrimaryRecord]:
    """Yield typed primary records in file order.

    Columns are addressed by header name. ``relevance`` is parsed as a float when
    ``relevance_kind`` is ``"float"`` and passed through verbatim when ``"string"``.
    With ``require_relevance=False`` an unlabeled file (no ``relevance`` column) is
    accepted and every record carries ``relevance=None``.
    """

    if relevance_kind not in RELEVANCE_KINDS:
        raise ValueError(f"Unknown relevance kind '{relevance_kind}'. Use one of: {', '.join(RELEVANCE_KINDS)}.")

    source = ensure_exists(path, argument)
    columns = _bind_columns(relevance_kind)
    required = [spec.name for spec in columns if require_relevance or spec.name != RELEVANCE_COLUMN]
    optional = () if require_relevance else (RELEVANCE_COLUMN,)

    with closing(iter_csv_rows(source, encoding=encoding)) as rows:
        first = next(rows, None)
        if first is None:
            raise SchemaError(source)
        positions = resolve_positions(source, first[1], required, optional)
        present = tuple(spec for spec in columns if spec.name in positions)

        for line, row in rows:
            if not row:
                continue
            payload = _convert_row(source, line, row, present, positions)
            try:
                yield PrimaryRecord.model_validate(payload)
            except ValidationError as exc:
                reason = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())
                raise InvalidRecordError(source, line, reason) from exc


def _bind_columns(relevance_kind: str) -> tuple[ColumnSpec, ...]:
    if relevance_kind == "float":
        return PRIMARY_COLUMNS
    return tuple(
        ColumnSpec(spec.name, str, spec.position) if spec.name == RELEVANCE_COLUMN else spec
        for spec in PRIMARY_COLUMNS
    )


def _convert_row(
    source: Path,
    line: int,
    row: list[str],
    columns: tuple[ColumnSpec, ...],
    positions: dict[str, int],
) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for spec in columns:
        index = positions[spec.name]
        if index >= len(row):
            raise InvalidRecordError(source, line, f"missing value for column '{spec.name}'")
        raw = row[index]
        if spec.kind is str:
            payload[spec.name] = raw
            continue
        try:
            payload[spec.name] = spec.kind(raw)
        except ValueError as exc:
            raise InvalidRecordError(
                source,
                line,
                f"column '{spec.name}' expected {spec.kind.__name__}, got {raw!r}",
            ) from exc
    return payload
