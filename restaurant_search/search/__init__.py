"""Search pipeline module."""

from restaurant_search.search.models import SearchRequest, SearchResponse, SearchResult
from restaurant_search.search.service import SearchService
from restaurant_search.search.summarizer import Summarizer

__all__ = [
    "SearchRequest",
    "SearchResponse",
    "SearchResult",
    "SearchService",
    "Summarizer",
]
