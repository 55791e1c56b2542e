"""Observability module for metrics and monitoring."""

from restaurant_search.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_embedding_request,
    track_index_rebuild,
    track_llm_request,
    track_search_request,
    track_summary,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "track_embedding_request",
    "track_index_rebuild",
    "track_llm_request",
    "track_search_request",
    "track_summary",
]
