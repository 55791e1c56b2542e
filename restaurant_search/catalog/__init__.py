"""Restaurant catalog module."""

from restaurant_search.catalog.loader import CatalogLoader
from restaurant_search.catalog.models import Catalog, RestaurantMetadata, RestaurantRecord

__all__ = [
    "Catalog",
    "CatalogLoader",
    "RestaurantMetadata",
    "RestaurantRecord",
]
