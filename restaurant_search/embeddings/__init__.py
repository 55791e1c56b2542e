"""Embedding client module."""

from restaurant_search.embeddings.models import EmbeddingResult
from restaurant_search.embeddings.service import EmbeddingService, HTTPEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "HTTPEmbeddingService",
]
