"""Pydantic data models and column descriptors shared by the reader, writer, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

ID_COLUMN = "id"
PRODUCT_UID_COLUMN = "product_uid"
PRODUCT_TITLE_COLUMN = "product_title"
SEARCH_TERM_COLUMN = "search_term"
RELEVANCE_COLUMN = "relevance"
PRODUCT_DESCRIPTION_COLUMN = "product_description"

RELEVANCE_KINDS: tuple[str, ...] = ("float", "string")
OUTPUT_LAYOUTS: tuple[str, ...] = ("full", "pair")


@dataclass(frozen=True)
class ColumnSpec:
    """Binds a logical field to its value type and declared load position."""

    name: str
    kind: type
    position: int


PRIMARY_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec(ID_COLUMN, int, 0),
    ColumnSpec(PRODUCT_UID_COLUMN, str, 1),
    ColumnSpec(PRODUCT_TITLE_COLUMN, str, 2),
    ColumnSpec(SEARCH_TERM_COLUMN, str, 3),
    ColumnSpec(RELEVANCE_COLUMN, float, 4),
)

LOOKUP_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec(PRODUCT_UID_COLUMN, str, 0),
    ColumnSpec(PRODUCT_DESCRIPTION_COLUMN, str, 1),
)

_LAYOUT_COLUMNS: dict[str, tuple[str, ...]] = {
    "full": (
        ID_COLUMN,
        PRODUCT_UID_COLUMN,
        PRODUCT_TITLE_COLUMN,
        SEARCH_TERM_COLUMN,
        RELEVANCE_COLUMN,
        PRODUCT_DESCRIPTION_COLUMN,
    ),
    "pair": (
        SEARCH_TERM_COLUMN,
        PRODUCT_DESCRIPTION_COLUMN,
        RELEVANCE_COLUMN,
    ),
}


def output_columns(layout: str, relevance_kind: str = "float") -> tuple[ColumnSpec, ...]:
    """Return the ordered output schema for ``layout``."""

    try:
        names = _LAYOUT_COLUMNS[layout]
    except KeyError as exc:
        raise ValueError(f"Unknown output layout '{layout}'. Use one of: {', '.join(OUTPUT_LAYOUTS)}.") from exc

    kinds = {spec.name: spec.kind for spec in PRIMARY_COLUMNS}
    kinds[PRODUCT_DESCRIPTION_COLUMN] = str
    if relevance_kind == "string":
        kinds[RELEVANCE_COLUMN] = str
    return tuple(ColumnSpec(name, kinds[name], position) for position, name in enumerate(names))


class PrimaryRecord(BaseModel):
    """One row of the base search/product dataset."""

    id: int = Field(..., description="Row identifier, unique per dataset; not used for joining.")
    product_uid: str = Field(..., description="Join key into the product description table.")
    product_title: str = Field(default="", description="Opaque passthrough title text.")
    search_term: str = Field(default="", description="Opaque passthrough search query.")
    relevance: float | str | None = Field(
        default=None,
        description="Opaque label; float or raw string depending on run mode, None for unlabeled rows.",
    )

    @field_validator("product_uid")
    @classmethod
    def _require_product_uid(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("product_uid must not be empty")
        return value


class EnrichedRecord(PrimaryRecord):
    """Primary record joined with its product description."""

    product_description: str = Field(..., description="Description joined on product_uid.")

    @field_validator("product_description")
    @classmethod
    def _require_description(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("product_description must not be blank")
        return value


class PreparationReport(BaseModel):
    """Summary of a single enriched output written by the pipeline."""

    output_path: Path
    rows_written: int = Field(..., ge=0)
    layout: str
    lookup_size: int = Field(..., ge=0)
    lookup_ms: float = 0.0
    enrich_ms: float = 0.0
