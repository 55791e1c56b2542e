"""FastAPI dependencies resolving services from application state."""

from typing import Any, cast

from fastapi import Request

from restaurant_search.admin.service import AdminService
from restaurant_search.catalog.models import Catalog
from restaurant_search.exceptions import ConfigurationError
from restaurant_search.search.service import SearchService


def _state_attr(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise ConfigurationError(
            f"Service '{name}' is not initialized",
            details={"service": name},
        )
    return value


def get_catalog(request: Request) -> Catalog:
    """Catalog loaded at startup."""
    return cast(Catalog, _state_attr(request, "catalog"))


def get_search_service(request: Request) -> SearchService:
    """Search orchestrator created at startup."""
    return cast(SearchService, _state_attr(request, "search_service"))


def get_admin_service(request: Request) -> AdminService:
    """Admin service created at startup."""
    return cast(AdminService, _state_attr(request, "admin_service"))
