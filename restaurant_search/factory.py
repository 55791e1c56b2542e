"""Service wiring for the API and the command-line tools."""

from dataclasses import dataclass

from restaurant_search.admin.service import AdminService, bootstrap_handles
from restaurant_search.catalog.loader import CatalogLoader
from restaurant_search.catalog.models import Catalog
from restaurant_search.config import Settings, get_settings
from restaurant_search.exceptions import VectorStoreError
from restaurant_search.embeddings.service import HTTPEmbeddingService
from restaurant_search.llm.client import OpenAICompatibleClient
from restaurant_search.logging_config import get_logger
from restaurant_search.search.service import SearchService
from restaurant_search.search.summarizer import Summarizer
from restaurant_search.vectorstore.handle import IndexHandle, IndexHandleProvider
from restaurant_search.vectorstore.service import QdrantVectorIndex

logger = get_logger(__name__)


@dataclass
class Services:
    """Fully wired services sharing one set of upstream clients."""

    catalog: Catalog
    handles: IndexHandleProvider
    search: SearchService
    admin: AdminService
    embedding_service: HTTPEmbeddingService
    vector_index: QdrantVectorIndex
    llm_client: OpenAICompatibleClient

    async def close(self) -> None:
        """Close every upstream client."""
        await self.embedding_service.close()
        await self.vector_index.close()
        await self.llm_client.close()
        logger.debug("Closed upstream clients")


async def build_services(settings: Settings | None = None) -> Services:
    """Load the catalog and create all services from settings.

    Args:
        settings: Application settings (defaults to the cached settings).

    Returns:
        Wired services. Call ``close()`` when done.

    Raises:
        CatalogError: If the catalog cannot be loaded.
    """
    settings = settings or get_settings()

    catalog = CatalogLoader().load(settings.catalog_path)

    embedding_service = HTTPEmbeddingService(settings.embedding)
    vector_index = QdrantVectorIndex(settings.qdrant)
    llm_client = OpenAICompatibleClient(settings.llm)

    alias = settings.qdrant.collection_name
    try:
        handles = await bootstrap_handles(vector_index, alias=alias, metric=settings.qdrant.distance)
    except VectorStoreError as e:
        # Start unresolved; searches and status re-read the alias once Qdrant is back.
        logger.error(
            f"Could not resolve index alias: {e.message}",
            extra={"error_code": e.code.value, "details": e.details},
        )
        handles = IndexHandleProvider(
            alias, IndexHandle(collection=None, metric=settings.qdrant.distance)
        )

    summarizer = Summarizer(llm_client, settings.search)
    search = SearchService(
        embedding_service,
        vector_index,
        handles,
        summarizer,
        settings.search,
    )
    admin = AdminService(catalog, embedding_service, vector_index, handles)

    return Services(
        catalog=catalog,
        handles=handles,
        search=search,
        admin=admin,
        embedding_service=embedding_service,
        vector_index=vector_index,
        llm_client=llm_client,
    )
