"""Vector index module."""

from restaurant_search.vectorstore.handle import IndexHandle, IndexHandleProvider
from restaurant_search.vectorstore.models import IndexedDocument, MetadataFilter, QueryMatch
from restaurant_search.vectorstore.scoring import score_from_distance
from restaurant_search.vectorstore.service import QdrantVectorIndex, VectorIndex

__all__ = [
    "IndexHandle",
    "IndexHandleProvider",
    "IndexedDocument",
    "MetadataFilter",
    "QdrantVectorIndex",
    "QueryMatch",
    "VectorIndex",
    "score_from_distance",
]
