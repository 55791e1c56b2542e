"""API routes for catalog browsing and search."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from restaurant_search.api.dependencies import get_catalog, get_search_service
from restaurant_search.catalog.models import Catalog, RestaurantRecord
from restaurant_search.logging_config import get_logger
from restaurant_search.search.models import SearchRequest, SearchResponse
from restaurant_search.search.service import SearchService

logger = get_logger(__name__)


# Create router
router = APIRouter(prefix="/api", tags=["Restaurants"])


@router.get("/restaurants", response_model=list[RestaurantRecord])
async def list_restaurants(
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> list[RestaurantRecord]:
    """Return the full restaurant catalog."""
    return list(catalog.records)


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(
    service: Annotated[SearchService, Depends(get_search_service)],
    request: Annotated[SearchRequest | None, Body()] = None,
) -> SearchResponse:
    """Natural-language restaurant search.

    A missing body is treated like a body without a query, so the caller
    gets "Query is required" rather than a schema error.
    """
    request = request or SearchRequest()
    return await service.search(
        request.query,
        threshold=request.threshold,
        size=request.size,
        min_stars=request.min_stars,
    )
