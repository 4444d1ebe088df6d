"""Search relevance data preparation package."""

from .enrich import enrich
from .lookup import build_lookup
from .pipeline import EnrichmentPipeline, build_pipeline

__all__ = ["EnrichmentPipeline", "build_lookup", "build_pipeline", "enrich"]
