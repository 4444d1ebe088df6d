"""Runtime configuration and environment helpers for data preparation runs."""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path

from .schemas import OUTPUT_LAYOUTS, RELEVANCE_KINDS

_DEFAULT_RELEVANCE_KIND = "float"
_DEFAULT_OUTPUT_LAYOUT = "full"
_DEFAULT_ENCODING = "utf-8"
_DEFAULT_LOG_LEVEL = "INFO"
_DEFAULT_DEMO_DIR = Path("outputs") / "demo"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration."""

    relevance_kind: str
    output_layout: str
    encoding: str
    log_level: str
    demo_dir: Path


def _parse_choice(value: str | None, choices: tuple[str, ...] | set[str], fallback: str) -> str:
    if value is None:
        return fallback
    normalized = value.strip().lower()
    return normalized if normalized in choices else fallback


def _parse_encoding(value: str | None, fallback: str) -> str:
    if not value:
        return fallback
    try:
        return codecs.lookup(value.strip()).name
    except LookupError:
        return fallback


def _parse_log_level(value: str | None, fallback: str) -> str:
    if value is None:
        return fallback
    normalized = value.strip().upper()
    return normalized if normalized in _LOG_LEVELS else fallback


def load_config() -> AppConfig:
    """Load configuration from environment variables, applying defaults."""

    relevance_kind = _parse_choice(os.getenv("SRP_RELEVANCE_KIND"), RELEVANCE_KINDS, _DEFAULT_RELEVANCE_KIND)
    output_layout = _parse_choice(os.getenv("SRP_OUTPUT_LAYOUT"), OUTPUT_LAYOUTS, _DEFAULT_OUTPUT_LAYOUT)
    encoding = _parse_encoding(os.getenv("SRP_ENCODING"), _DEFAULT_ENCODING)
    log_level = _parse_log_level(os.getenv("SRP_LOG_LEVEL"), _DEFAULT_LOG_LEVEL)
    demo_dir = Path(os.getenv("SRP_DEMO_DIR", str(_DEFAULT_DEMO_DIR)))

    return AppConfig(
        relevance_kind=relevance_kind,
        output_layout=output_layout,
        encoding=encoding,
        log_level=log_level,
        demo_dir=demo_dir,
    )


config = load_config()
"""Singleton config loaded at import time for convenience."""
