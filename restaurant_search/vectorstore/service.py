"""Vector index interface and Qdrant implementation."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import NAMESPACE_URL, uuid5

import httpx
from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from qdrant_client.models import (
    CreateAlias,
    CreateAliasOperation,
    DeleteAlias,
    DeleteAliasOperation,
    FieldCondition,
    Filter,
    MatchValue,
    PointStruct,
    Range,
    VectorParams,
)

from restaurant_search.config import DistanceMetric, QdrantSettings, get_settings
from restaurant_search.exceptions import ErrorCode, VectorStoreError
from restaurant_search.logging_config import get_logger
from restaurant_search.vectorstore.models import IndexedDocument, MetadataFilter, QueryMatch
from restaurant_search.vectorstore.scoring import (
    QDRANT_DISTANCE,
    distance_from_qdrant_score,
    metric_from_qdrant,
)

logger = get_logger(__name__)

# Payload keys reserved for the record id and text; everything else is metadata.
DOC_ID_KEY = "doc_id"
DOCUMENT_KEY = "document"


def point_id(doc_id: str) -> str:
    """Deterministic Qdrant point id (UUIDv5) for a catalog identifier."""
    return str(uuid5(NAMESPACE_URL, f"restaurant-search/{doc_id}"))


def _error_code(error: Exception) -> ErrorCode:
    """Classify a Qdrant client failure.

    Connection problems, timeouts, 429 and 5xx responses are
    VECTOR_STORE_UNAVAILABLE and worth retrying. A missing collection or
    alias is COLLECTION_NOT_FOUND. Anything else is permanent.
    """
    if isinstance(error, UnexpectedResponse):
        if error.status_code == 404:
            return ErrorCode.COLLECTION_NOT_FOUND
        if error.status_code is not None and (
            error.status_code == 429 or error.status_code >= 500
        ):
            return ErrorCode.VECTOR_STORE_UNAVAILABLE
        return ErrorCode.VECTOR_STORE_ERROR
    if isinstance(error, ResponseHandlingException | httpx.TransportError | TimeoutError):
        return ErrorCode.VECTOR_STORE_UNAVAILABLE
    # The in-process client reports unknown collections as ValueError.
    if isinstance(error, ValueError) and "not found" in str(error):
        return ErrorCode.COLLECTION_NOT_FOUND
    return ErrorCode.VECTOR_STORE_ERROR


class VectorIndex(ABC):
    """Abstract base class for vector indexes.

    Every operation takes a collection name. Reads may pass the alias
    instead, which Qdrant resolves on each request.
    """

    @abstractmethod
    async def add(
        self,
        collection: str,
        ids: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
        documents: list[str],
    ) -> int:
        """Store documents with their vectors.

        Args:
            collection: Collection name.
            ids: Catalog identifiers.
            embeddings: One vector per id.
            metadatas: One metadata dict per id.
            documents: One text per id.

        Returns:
            Number of documents written.

        Raises:
            VectorStoreError: On length mismatch or transport failure.
        """
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        embedding: list[float],
        top_k: int,
        metadata_filter: MetadataFilter | None = None,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> list[QueryMatch]:
        """Find the ``top_k`` nearest documents.

        Returns:
            Matches ranked by ascending distance; empty for an empty index.

        Raises:
            VectorStoreError: On transport failure or a missing collection.
        """
        ...

    @abstractmethod
    async def recreate(
        self,
        collection: str,
        dimensions: int,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> None:
        """Drop ``collection`` if present and create it empty. Idempotent."""
        ...

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Exact number of documents; 0 when the collection does not exist."""
        ...

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        """Delete a collection. A missing collection is not an error."""
        ...

    @abstractmethod
    async def point_alias(self, alias: str, collection: str) -> None:
        """Atomically make ``alias`` refer to ``collection``."""
        ...

    @abstractmethod
    async def resolve_alias(self, alias: str) -> str | None:
        """Collection currently behind ``alias``, or None."""
        ...

    @abstractmethod
    async def collection_metric(self, collection: str) -> DistanceMetric | None:
        """Distance metric ``collection`` was created with.

        Returns:
            The metric, or None if Qdrant reports one this service does not use.
        """
        ...


class QdrantVectorIndex(VectorIndex):
    """Qdrant vector index implementation."""

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize the Qdrant index client.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            if self._settings.url == ":memory:":
                self._client = AsyncQdrantClient(location=":memory:")
            else:
                api_key = None
                if self._settings.api_key:
                    api_key = self._settings.api_key.get_secret_value()

                self._client = AsyncQdrantClient(
                    url=self._settings.url,
                    api_key=api_key,
                    timeout=self._settings.timeout,
                )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def add(
        self,
        collection: str,
        ids: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
        documents: list[str],
    ) -> int:
        """Upsert documents into a collection."""
        lengths = {len(ids), len(embeddings), len(metadatas), len(documents)}
        if len(lengths) != 1:
            raise VectorStoreError(
                "ids, embeddings, metadatas and documents must have equal length",
                code=ErrorCode.VECTOR_STORE_INPUT_MISMATCH,
                details={
                    "ids": len(ids),
                    "embeddings": len(embeddings),
                    "metadatas": len(metadatas),
                    "documents": len(documents),
                },
            )
        if not ids:
            return 0

        docs = [
            IndexedDocument(id=i, embedding=e, metadata=m, document=d)
            for i, e, m, d in zip(ids, embeddings, metadatas, documents, strict=True)
        ]
        client = await self._get_client()

        try:
            points = [
                PointStruct(
                    id=point_id(doc.id),
                    vector=doc.embedding,
                    payload={**doc.metadata, DOC_ID_KEY: doc.id, DOCUMENT_KEY: doc.document},
                )
                for doc in docs
            ]

            await client.upsert(collection_name=collection, points=points, wait=True)

            logger.debug(
                f"Added {len(points)} documents",
                extra={"collection": collection},
            )
            return len(points)

        except Exception as e:
            raise VectorStoreError(
                f"Failed to add documents: {e}",
                code=_error_code(e),
                details={"collection": collection, "error": str(e)},
            ) from e

    async def query(
        self,
        collection: str,
        embedding: list[float],
        top_k: int,
        metadata_filter: MetadataFilter | None = None,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> list[QueryMatch]:
        """Search for the nearest documents."""
        client = await self._get_client()

        try:
            response = await client.query_points(
                collection_name=collection,
                query=embedding,
                limit=top_k,
                query_filter=self._build_filter(metadata_filter),
                with_payload=True,
            )
        except Exception as e:
            raise VectorStoreError(
                f"Failed to query index: {e}",
                code=_error_code(e),
                details={"collection": collection, "error": str(e)},
            ) from e

        matches: list[QueryMatch] = []
        for point in response.points:
            payload = dict(point.payload) if point.payload else {}
            doc_id = str(payload.pop(DOC_ID_KEY, point.id))
            document = str(payload.pop(DOCUMENT_KEY, ""))
            raw_score = point.score if point.score is not None else 0.0
            matches.append(
                QueryMatch(
                    id=doc_id,
                    document=document,
                    metadata=payload,
                    distance=distance_from_qdrant_score(metric, raw_score),
                )
            )
        return matches

    async def recreate(
        self,
        collection: str,
        dimensions: int,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> None:
        """Drop and create an empty collection."""
        client = await self._get_client()

        try:
            if await client.collection_exists(collection):
                await client.delete_collection(collection)

            await client.create_collection(
                collection_name=collection,
                vectors_config=VectorParams(
                    size=dimensions,
                    distance=QDRANT_DISTANCE[metric],
                ),
            )
            logger.info(
                f"Recreated collection: {collection}",
                extra={"dimensions": dimensions, "metric": metric.value},
            )

        except Exception as e:
            raise VectorStoreError(
                f"Failed to recreate collection: {e}",
                code=_error_code(e),
                details={"collection": collection, "error": str(e)},
            ) from e

    async def count(self, collection: str) -> int:
        """Count documents in a collection."""
        client = await self._get_client()
        try:
            if not await client.collection_exists(collection):
                return 0
            result = await client.count(collection_name=collection, exact=True)
            return result.count
        except Exception as e:
            raise VectorStoreError(
                f"Failed to count documents: {e}",
                code=_error_code(e),
                details={"collection": collection, "error": str(e)},
            ) from e

    async def delete_collection(self, name: str) -> None:
        """Delete a collection if it exists."""
        client = await self._get_client()

        try:
            if not await client.collection_exists(name):
                return
            await client.delete_collection(name)
            logger.info(f"Deleted collection: {name}")

        except Exception as e:
            raise VectorStoreError(
                f"Failed to delete collection: {e}",
                code=_error_code(e),
                details={"collection": name, "error": str(e)},
            ) from e

    async def point_alias(self, alias: str, collection: str) -> None:
        """Move ``alias`` to ``collection`` in a single alias update."""
        client = await self._get_client()

        try:
            operations: list[CreateAliasOperation | DeleteAliasOperation] = []
            if await self._find_alias(client, alias) is not None:
                operations.append(
                    DeleteAliasOperation(delete_alias=DeleteAlias(alias_name=alias))
                )
            operations.append(
                CreateAliasOperation(
                    create_alias=CreateAlias(collection_name=collection, alias_name=alias)
                )
            )
            await client.update_collection_aliases(change_aliases_operations=operations)
            logger.info(f"Alias {alias} now points at {collection}")

        except Exception as e:
            raise VectorStoreError(
                f"Failed to update alias: {e}",
                code=_error_code(e),
                details={"alias": alias, "collection": collection, "error": str(e)},
            ) from e

    async def resolve_alias(self, alias: str) -> str | None:
        """Look up the collection behind an alias."""
        client = await self._get_client()
        try:
            return await self._find_alias(client, alias)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to resolve alias: {e}",
                code=_error_code(e),
                details={"alias": alias, "error": str(e)},
            ) from e

    async def collection_metric(self, collection: str) -> DistanceMetric | None:
        """Read the distance from the collection's vector config."""
        client = await self._get_client()
        try:
            info = await client.get_collection(collection)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to read collection config: {e}",
                code=_error_code(e),
                details={"collection": collection, "error": str(e)},
            ) from e

        vectors = info.config.params.vectors
        # Named vectors come back as a mapping; this index only ever creates one.
        if isinstance(vectors, dict):
            vectors = next(iter(vectors.values()), None)
        if vectors is None:
            return None
        return metric_from_qdrant(vectors.distance)

    @staticmethod
    async def _find_alias(client: AsyncQdrantClient, alias: str) -> str | None:
        response = await client.get_aliases()
        for description in response.aliases:
            if description.alias_name == alias:
                return description.collection_name
        return None

    @staticmethod
    def _build_filter(metadata_filter: MetadataFilter | None) -> Filter | None:
        if metadata_filter is None or metadata_filter.is_empty():
            return None

        conditions: list[FieldCondition] = [
            FieldCondition(key=key, match=MatchValue(value=value))
            for key, value in metadata_filter.equals.items()
        ]
        conditions.extend(
            FieldCondition(key=key, range=Range(gte=value))
            for key, value in metadata_filter.gte.items()
        )
        return Filter(must=conditions)  # type: ignore[arg-type]
