"""Admin routes for index lifecycle operations."""

from typing import Annotated

from fastapi import APIRouter, Depends

from restaurant_search.admin.models import AdminMessage, IndexStatus
from restaurant_search.admin.service import AdminService
from restaurant_search.api.dependencies import get_admin_service

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/clear", response_model=AdminMessage)
async def clear_index(
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> AdminMessage:
    """Replace the live index with an empty one."""
    return AdminMessage(message=await service.clear())


@router.post("/repopulate", response_model=AdminMessage)
async def repopulate_index(
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> AdminMessage:
    """Rebuild the index from the catalog."""
    return AdminMessage(message=await service.repopulate())


@router.get("/status", response_model=IndexStatus)
async def index_status(
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> IndexStatus:
    """Report whether the index matches the catalog."""
    return await service.status()
