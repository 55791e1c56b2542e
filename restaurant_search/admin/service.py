"""Index lifecycle operations: status, clear, repopulate.

Rebuilds never touch the live collection. A new physical collection is built
next to it, the alias and the in-process handle are moved over, and the old
collection is dropped only after this process's readers have drained.
Readers in other processes query through the alias, so they move to the new
collection as soon as the alias does.
"""

import time

from restaurant_search.admin.models import IndexStatus
from restaurant_search.catalog.models import Catalog
from restaurant_search.config import DistanceMetric
from restaurant_search.embeddings.service import EmbeddingService
from restaurant_search.exceptions import EmbeddingError, VectorStoreError
from restaurant_search.logging_config import get_logger
from restaurant_search.observability.metrics import track_index_rebuild
from restaurant_search.vectorstore.handle import IndexHandle, IndexHandleProvider
from restaurant_search.vectorstore.service import VectorIndex

logger = get_logger(__name__)


async def bootstrap_handles(
    vector_index: VectorIndex,
    alias: str,
    metric: DistanceMetric,
) -> IndexHandleProvider:
    """Create a handle provider pointing at whatever ``alias`` resolves to.

    The handle takes the metric the live collection was built with. The
    configured ``metric`` applies to collections built from now on.

    Args:
        vector_index: Index used to resolve the alias.
        alias: Stable alias name.
        metric: Metric for new builds.

    Returns:
        A provider whose handle has no collection if the alias is unset.

    Raises:
        VectorStoreError: If Qdrant cannot be reached.
    """
    handles = IndexHandleProvider(
        alias,
        IndexHandle(collection=None, metric=metric),
        build_metric=metric,
    )
    handle = await handles.reload(vector_index)
    logger.info(
        "Resolved index alias",
        extra={"alias": alias, "collection": handle.collection, "metric": handle.metric.value},
    )
    if handle.collection is not None and handle.metric != metric:
        logger.warning(
            "Live collection metric differs from configuration; next rebuild switches",
            extra={"live": handle.metric.value, "configured": metric.value},
        )
    return handles


class AdminService:
    """Admin operations over the vector index."""

    def __init__(
        self,
        catalog: Catalog,
        embedding_service: EmbeddingService,
        vector_index: VectorIndex,
        handles: IndexHandleProvider,
    ) -> None:
        """Initialize the admin service.

        Args:
            catalog: Restaurant catalog (source of truth).
            embedding_service: Service used to embed catalog records.
            vector_index: Index being managed.
            handles: Provider of the live collection handle.
        """
        self._catalog = catalog
        self._embedding_service = embedding_service
        self._vector_index = vector_index
        self._handles = handles

    async def status(self) -> IndexStatus:
        """Compare the live collection size with the catalog size.

        The alias is re-read first, so a rebuild done by another process is
        reflected here.
        """
        handle = await self._handles.reload(self._vector_index)
        document_count = 0
        if handle.collection is not None:
            document_count = await self._vector_index.count(handle.collection)

        catalog_count = len(self._catalog)
        return IndexStatus(
            document_count=document_count,
            restaurants_in_json=catalog_count,
            needs_repopulate=document_count != catalog_count,
        )

    async def clear(self) -> str:
        """Swap in an empty collection.

        Returns:
            Human-readable confirmation.

        Raises:
            VectorStoreError: If the index cannot be rebuilt.
        """
        start = time.perf_counter()
        try:
            async with self._handles.write_lock:
                await self._build_and_swap(
                    dimensions=self._embedding_service.dimensions,
                    embeddings=[],
                )
        except VectorStoreError:
            track_index_rebuild("clear", time.perf_counter() - start, success=False)
            raise

        track_index_rebuild("clear", time.perf_counter() - start, document_count=0)
        logger.info("Index cleared")
        return "Index cleared successfully"

    async def repopulate(self) -> str:
        """Embed the whole catalog into a new collection and swap it in.

        Returns:
            Human-readable confirmation with the document count.

        Raises:
            EmbeddingError: If the catalog cannot be embedded.
            VectorStoreError: If the index cannot be rebuilt.
        """
        start = time.perf_counter()
        try:
            async with self._handles.write_lock:
                written = await self._populate()
        except (EmbeddingError, VectorStoreError):
            track_index_rebuild("repopulate", time.perf_counter() - start, success=False)
            raise

        track_index_rebuild(
            "repopulate", time.perf_counter() - start, document_count=written
        )
        logger.info(f"Index repopulated with {written} restaurants")
        return f"Index repopulated with {written} restaurants"

    async def ensure_populated(self) -> bool:
        """Repopulate when the live collection is out of sync with the catalog.

        Returns:
            True if a rebuild happened.
        """
        current = await self.status()
        if not current.needs_repopulate:
            logger.info(
                "Index is in sync with catalog",
                extra={"document_count": current.document_count},
            )
            return False

        logger.info(
            "Index is out of sync with catalog, repopulating",
            extra={
                "document_count": current.document_count,
                "catalog_count": current.restaurants_in_json,
            },
        )
        await self.repopulate()
        return True

    async def _populate(self) -> int:
        embeddings: list[list[float]] = []
        if len(self._catalog):
            results = await self._embedding_service.embed_batch(self._catalog.documents())
            embeddings = [r.embedding for r in results]

        dimensions = len(embeddings[0]) if embeddings else self._embedding_service.dimensions
        return await self._build_and_swap(dimensions=dimensions, embeddings=embeddings)

    async def _build_and_swap(self, dimensions: int, embeddings: list[list[float]]) -> int:
        """Build a fresh collection, point the alias at it, retire the old one.

        Must be called while holding the provider's write lock. An empty
        ``embeddings`` list builds an empty collection. Both the collection
        behind the alias and the one this process last used are retired; they
        differ when another process rebuilt the index in between.
        """
        metric = self._handles.build_metric
        live = await self._vector_index.resolve_alias(self._handles.alias)
        retired = {c for c in (live, self._handles.current().collection) if c is not None}
        new_collection = self._handles.new_collection_name()

        await self._vector_index.recreate(new_collection, dimensions, metric)
        written = 0
        try:
            if embeddings:
                written = await self._vector_index.add(
                    new_collection,
                    ids=self._catalog.ids(),
                    embeddings=embeddings,
                    metadatas=self._catalog.metadatas(),
                    documents=self._catalog.documents(),
                )
            await self._vector_index.point_alias(self._handles.alias, new_collection)
        except VectorStoreError:
            await self._vector_index.delete_collection(new_collection)
            raise

        await self._handles.swap(new_collection, metric)
        for collection in sorted(retired - {new_collection}):
            await self._vector_index.delete_collection(collection)

        return written
