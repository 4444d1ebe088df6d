"""Output sinks that stage enriched rows and publish them atomically."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from .errors import SerializationError
from .flatten import format_csv_row


class RowSink(Protocol):
    """Minimal interface for persisting flattened rows."""

    def write_rows(self, rows: Iterable[list[str]]) -> int:  # pragma: no cover - Protocol
        """Write every row and return the number written."""

    def commit(self) -> Path:  # pragma: no cover - Protocol
        """Publish the written rows at their final destination."""

    def rollback(self) -> None:  # pragma: no cover - Protocol
        """Withdraw a committed output and restore what it replaced."""

    def release(self) -> None:  # pragma: no cover - Protocol
        """Make a commit final."""

    def discard(self) -> None:  # pragma: no cover - Protocol
        """Drop anything written so far."""


class StagedCSVSink:
    """Writes rows to a sibling temp file and renames it over the destination on commit.

    A failed run leaves no file at the destination (or the previous file untouched).
    A file replaced by ``commit`` is kept as ``<name>.bak`` until ``release`` or
    ``rollback``.
    """

    def __init__(self, destination: Path | str, *, encoding: str = "utf-8") -> None:
        self._destination = Path(destination)
        self._staging = self._destination.with_name(f"{self._destination.name}.tmp")
        self._backup = self._destination.with_name(f"{self._destination.name}.bak")
        self._backed_up = False
        self._committed = False
        self._encoding = encoding

    @property
    def destination(self) -> Path:
        return self._destination

    @property
    def staging_path(self) -> Path:
        return self._staging

    @property
    def backup_path(self) -> Path:
        return self._backup

    def write_rows(self, rows: Iterable[list[str]]) -> int:
        written = 0
        try:
            self._staging.parent.mkdir(parents=True, exist_ok=True)
            handle = self._staging.open("w", encoding=self._encoding, newline="")
        except OSError as exc:
            raise SerializationError(self._destination, str(exc)) from exc

        # Errors raised by the row iterator itself propagate unchanged.
        with handle:
            for row in rows:
                line = format_csv_row(row)
                try:
                    handle.write(line)
                except (OSError, UnicodeEncodeError) as exc:
                    raise SerializationError(self._destination, str(exc)) from exc
                written += 1
            try:
                handle.flush()
                os.fsync(handle.fileno())
            except OSError as exc:
                raise SerializationError(self._destination, str(exc)) from exc
        return written

    def commit(self) -> Path:
        """Move the staged file onto the destination, keeping any previous file as a backup."""

        try:
            if self._destination.exists():
                self._destination.replace(self._backup)
                self._backed_up = True
            self._staging.replace(self._destination)
        except OSError as exc:
            self._restore_backup()
            raise SerializationError(self._destination, str(exc)) from exc
        self._committed = True
        return self._destination

    def rollback(self) -> None:
        """Undo a successful commit, putting the previous destination file back if there was one."""

        if not self._committed:
            return
        self._committed = False
        if self._backed_up:
            self._restore_backup()
        else:
            self._destination.unlink(missing_ok=True)

    def release(self) -> None:
        """Drop the backup kept by ``commit`` once the output is final."""

        if self._backed_up:
            self._backup.unlink(missing_ok=True)
            self._backed_up = False

    def discard(self) -> None:
        self._staging.unlink(missing_ok=True)

    def _restore_backup(self) -> None:
        if self._backed_up:
            self._backup.replace(self._destination)
            self._backed_up = False
