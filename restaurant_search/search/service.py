"""Search orchestrator: embed, query, score, filter, summarize."""

import time

from restaurant_search.config import SearchSettings, get_settings
from restaurant_search.embeddings.service import EmbeddingService
from restaurant_search.exceptions import (
    EmbeddingError,
    ErrorCode,
    ValidationError,
    VectorStoreError,
)
from restaurant_search.logging_config import get_logger
from restaurant_search.observability.metrics import track_search_request
from restaurant_search.retry import retry_async
from restaurant_search.search.models import SearchResponse, SearchResult
from restaurant_search.search.summarizer import Summarizer
from restaurant_search.vectorstore.handle import IndexHandle, IndexHandleProvider
from restaurant_search.vectorstore.models import MetadataFilter, QueryMatch
from restaurant_search.vectorstore.scoring import score_from_distance
from restaurant_search.vectorstore.service import VectorIndex

logger = get_logger(__name__)


class SearchService:
    """Runs a natural-language search over the restaurant index.

    The three upstream calls are strictly sequential: the query embedding
    feeds the vector query, whose results feed the summary. Embedding and
    vector failures fail the whole search; summary failures never do.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_index: VectorIndex,
        handles: IndexHandleProvider,
        summarizer: Summarizer,
        settings: SearchSettings | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            embedding_service: Service used to embed the query.
            vector_index: Index queried for nearest neighbours.
            handles: Provider of the live collection handle.
            summarizer: Summary generator for the top results.
            settings: Retry tuning.
        """
        self._embedding_service = embedding_service
        self._vector_index = vector_index
        self._handles = handles
        self._summarizer = summarizer
        self._settings = settings or get_settings().search

    async def search(
        self,
        query: str | None,
        threshold: float = 0.5,
        size: int = 5,
        min_stars: int = 0,
    ) -> SearchResponse:
        """Search restaurants matching ``query``.

        Args:
            query: Free-text query; required.
            threshold: Results scoring below this are dropped.
            size: Candidates requested from the index (upper bound on results).
            min_stars: When positive, only restaurants with at least this
                many stars are considered.

        Returns:
            Ranked results (best first) and a summary.

        Raises:
            ValidationError: If the query is missing or ``size`` is not positive.
            EmbeddingError: If the query cannot be embedded.
            VectorStoreError: If the index cannot be queried.
        """
        if query is None or not query.strip():
            raise ValidationError("Query is required", details={"field": "query"})
        if size < 1:
            raise ValidationError(
                "size must be a positive integer",
                details={"field": "size", "value": size},
            )

        start = time.perf_counter()
        try:
            results = await self._ranked_results(query, threshold, size, min_stars)
        except (EmbeddingError, VectorStoreError):
            track_search_request(
                duration=time.perf_counter() - start,
                results_returned=0,
                top_score=None,
                success=False,
            )
            raise

        summary = await self._summarizer.summarize(results)

        track_search_request(
            duration=time.perf_counter() - start,
            results_returned=len(results),
            top_score=results[0].score if results else None,
        )
        logger.info(
            "Search completed",
            extra={
                "query_length": len(query),
                "size": size,
                "min_stars": min_stars,
                "results_count": len(results),
            },
        )

        return SearchResponse(results=results, summary=summary)

    async def _ranked_results(
        self,
        query: str,
        threshold: float,
        size: int,
        min_stars: int,
    ) -> list[SearchResult]:
        embedding_result = await retry_async(
            lambda: self._embedding_service.embed(query),
            attempts=self._settings.retry_attempts,
            backoff=self._settings.retry_backoff,
            retry_on=(EmbeddingError,),
            description="Query embedding",
        )

        metadata_filter = MetadataFilter(gte={"stars": min_stars}) if min_stars > 0 else None

        try:
            handle, matches = await self._query_live(
                embedding_result.embedding, size, metadata_filter
            )
        except VectorStoreError as e:
            unbuilt = self._handles.current().collection is None
            if e.code != ErrorCode.COLLECTION_NOT_FOUND or unbuilt:
                raise
            # The collection behind the alias went away mid-query (another
            # process rebuilt the index). Re-read the alias and try once more.
            logger.warning(
                "Live collection disappeared, re-reading index alias",
                extra={"alias": self._handles.alias, "error_code": e.code.value},
            )
            handle, matches = await self._query_live(
                embedding_result.embedding, size, metadata_filter, reload=True
            )

        # Index order (ascending distance) is kept; no re-sort after filtering.
        scored = [
            SearchResult(
                id=match.id,
                content=match.document,
                metadata=match.metadata,
                score=score_from_distance(handle.metric, match.distance),
            )
            for match in matches
        ]
        results = [r for r in scored if r.score >= threshold]

        logger.debug(
            f"Kept {len(results)} of {len(scored)} candidates",
            extra={"threshold": threshold, "version": handle.version},
        )
        return results

    async def _query_live(
        self,
        embedding: list[float],
        size: int,
        metadata_filter: MetadataFilter | None,
        reload: bool = False,
    ) -> tuple[IndexHandle, list[QueryMatch]]:
        """Query the collection behind the alias under a pinned handle."""
        if reload or self._handles.current().collection is None:
            await self._handles.reload(self._vector_index)

        async with self._handles.acquire() as handle:
            if handle.collection is None:
                raise VectorStoreError(
                    "The restaurant index has not been built yet",
                    code=ErrorCode.COLLECTION_NOT_FOUND,
                    details={"alias": self._handles.alias},
                )
            matches: list[QueryMatch] = await retry_async(
                lambda: self._vector_index.query(
                    self._handles.alias,
                    embedding,
                    top_k=size,
                    metadata_filter=metadata_filter,
                    metric=handle.metric,
                ),
                attempts=self._settings.retry_attempts,
                backoff=self._settings.retry_backoff,
                retry_on=(VectorStoreError,),
                retry_if=_is_transient,
                description="Vector query",
            )
        return handle, matches


def _is_transient(error: BaseException) -> bool:
    return (
        isinstance(error, VectorStoreError)
        and error.code == ErrorCode.VECTOR_STORE_UNAVAILABLE
    )
