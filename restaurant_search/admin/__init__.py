"""Index administration module."""

from restaurant_search.admin.models import AdminMessage, IndexStatus
from restaurant_search.admin.service import AdminService, bootstrap_handles

__all__ = ["AdminMessage", "AdminService", "IndexStatus", "bootstrap_handles"]
