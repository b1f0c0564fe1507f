"""Embedding enrichment for stored profiles."""

from .service import EmbeddingEnricher, EnrichmentResult

__all__ = ["EmbeddingEnricher", "EnrichmentResult"]
