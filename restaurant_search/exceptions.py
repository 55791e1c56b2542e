"""Application exception hierarchy.

All custom exceptions inherit from RestaurantSearchError.
Each exception has an error code for structured error handling.
Failures of remote services (embedding API, Qdrant, LLM) share the
UpstreamError base so callers can treat them uniformly.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "RST-1000"
    CONFIGURATION_ERROR = "RST-1001"
    VALIDATION_ERROR = "RST-1002"

    # Catalog errors (2xxx)
    CATALOG_NOT_FOUND = "RST-2000"
    CATALOG_PARSE_ERROR = "RST-2001"

    # Upstream errors (3xxx)
    UPSTREAM_ERROR = "RST-3000"
    EMBEDDING_SERVICE_ERROR = "RST-3100"
    EMBEDDING_DIMENSION_MISMATCH = "RST-3101"
    VECTOR_STORE_ERROR = "RST-3200"
    COLLECTION_NOT_FOUND = "RST-3201"
    VECTOR_STORE_INPUT_MISMATCH = "RST-3202"
    VECTOR_STORE_UNAVAILABLE = "RST-3203"
    LLM_SERVICE_ERROR = "RST-3300"
    LLM_TIMEOUT = "RST-3301"
    LLM_RATE_LIMIT = "RST-3302"


class RestaurantSearchError(Exception):
    """Base exception for all restaurant search errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RestaurantSearchError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(RestaurantSearchError):
    """Invalid client input. Surfaces as HTTP 400."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class CatalogError(RestaurantSearchError):
    """Restaurant catalog could not be loaded."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CATALOG_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class UpstreamError(RestaurantSearchError):
    """A remote service failed or timed out."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UPSTREAM_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingError(UpstreamError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(UpstreamError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class LLMError(UpstreamError):
    """LLM service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
