"""Exception taxonomy shared by the lookup builder, reader, and pipeline."""

from __future__ import annotations

from pathlib import Path

PREVIEW_CHARS = 32


def preview(value: str | None, limit: int = PREVIEW_CHARS) -> str:
    """Return at most ``limit`` characters of ``value`` with an ellipsis when truncated."""

    if value is None:
        return ""
    if len(value) <= limit:
        return value
    return f"{value[:limit]}..."


class DataPreparationError(Exception):
    """Base class for fatal data preparation failures."""

    error_type = "data_preparation_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DataPreparationError):
    """A required input path does not exist."""

    error_type = "not_found"

    def __init__(self, path: Path | str, argument: str) -> None:
        super().__init__(f"Unable to locate {argument}: {path}")
        self.path = Path(path)
        self.argument = argument


class SchemaError(DataPreparationError):
    """The header row is missing or lacks a required column."""

    error_type = "schema_error"

    def __init__(self, path: Path | str, missing: list[str] | None = None) -> None:
        if missing:
            message = f"{path}: header is missing required column(s): {', '.join(missing)}"
        else:
            message = f"{path}: file is empty, expected a header row"
        super().__init__(message)
        self.path = Path(path)
        self.missing = list(missing or [])


class MalformedRowError(DataPreparationError):
    """A lookup row has an empty key or an empty/whitespace value."""

    error_type = "malformed_row"

    def __init__(self, key: str | None, value: str | None, line: int) -> None:
        super().__init__(
            f"Invalid product description row at line {line} "
            f"(product_uid: {key or ''}, product_description: {preview(value)})"
        )
        self.key = key
        self.line = line


class DuplicateKeyError(DataPreparationError):
    """A lookup key appears more than once."""

    error_type = "duplicate_key"

    def __init__(self, key: str, line: int) -> None:
        super().__init__(f"Duplicate product_uid '{key}' at line {line}")
        self.key = key
        self.line = line


class DecodingError(DataPreparationError):
    """An input file holds bytes that are invalid in the configured encoding."""

    error_type = "decoding_error"

    def __init__(self, path: Path | str, encoding: str, reason: str) -> None:
        super().__init__(f"{path}: cannot decode as {encoding}: {reason}")
        self.path = Path(path)
        self.encoding = encoding


class InvalidRecordError(DataPreparationError):
    """A data row cannot be parsed as CSV or converted into a typed record."""

    error_type = "invalid_record"

    def __init__(self, path: Path | str, line: int, reason: str) -> None:
        super().__init__(f"{path}: invalid record at line {line}: {reason}")
        self.path = Path(path)
        self.line = line


class JoinIntegrityError(DataPreparationError):
    """A primary record's product_uid has no usable lookup entry."""

    error_type = "join_integrity"

    def __init__(self, product_uid: str) -> None:
        super().__init__(f"Product description for product '{product_uid}' was missing or blank.")
        self.product_uid = product_uid


class SerializationError(DataPreparationError):
    """Writing the enriched output failed at the OS level."""

    error_type = "serialization_error"

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = Path(path)
