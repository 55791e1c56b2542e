"""FastAPI application entry point.

Configures the application with logging, exception handling, CORS, metrics,
and health checks. Services are built once in the lifespan and kept on
``app.state``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from restaurant_search import __version__
from restaurant_search.api.admin import router as admin_router
from restaurant_search.api.routes import router as search_router
from restaurant_search.config import get_settings
from restaurant_search.exceptions import ErrorCode, RestaurantSearchError
from restaurant_search.factory import build_services
from restaurant_search.logging_config import get_logger, setup_logging
from restaurant_search.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds services on startup, optionally repopulates an out-of-sync index,
    and closes upstream clients on shutdown.
    """
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting Restaurant Search",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
        },
    )

    services = await build_services(settings)
    app.state.catalog = services.catalog
    app.state.search_service = services.search
    app.state.admin_service = services.admin

    if settings.populate_on_startup:
        try:
            await services.admin.ensure_populated()
        except RestaurantSearchError as e:
            # Serve anyway; admins can repopulate once upstreams recover.
            logger.error(
                f"Startup populate failed: {e.message}",
                extra={"error_code": e.code.value, "details": e.details},
            )

    yield

    # Shutdown
    logger.info("Shutting down Restaurant Search")
    await services.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Restaurant Search",
        description="Natural-language restaurant search with vector retrieval and LLM summaries",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(RestaurantSearchError, restaurant_search_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routes
    app.include_router(search_router)
    app.include_router(admin_router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["Monitoring"])

    return app


async def restaurant_search_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle RestaurantSearchError exceptions.

    Invalid input is reported to the client verbatim. Everything else is
    logged with full details and reported with a generic message.
    """
    # Type narrow to RestaurantSearchError
    if not isinstance(exc, RestaurantSearchError):
        return await unhandled_exception_handler(request, exc)

    if exc.code == ErrorCode.VALIDATION_ERROR:
        logger.info(
            f"Rejected request: {exc.message}",
            extra={"path": request.url.path, "details": exc.details},
        )
        return JSONResponse(status_code=400, content={"error": exc.message})

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


async def request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Report schema violations (bad types, NaN, out-of-range) as 400."""
    if not isinstance(exc, RequestValidationError):
        return await unhandled_exception_handler(request, exc)

    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {_describe_validation_error(exc)}"},
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Last-resort handler; never leaks exception text to the client."""
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Render the first validation error as ``field: reason``."""
    errors = exc.errors()
    if not errors:
        return "malformed body"

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    message = str(first.get("msg", "invalid value"))
    if not loc:
        return message
    return f"{'.'.join(loc)}: {message}"


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> dict[str, Any]:
    """Kubernetes readiness probe.

    Checks that the catalog is loaded and the services are wired.

    Returns:
        Readiness status with component checks.
    """
    state = request.app.state
    catalog = getattr(state, "catalog", None)
    checks: dict[str, str] = {
        "config": "ok",
        "catalog": "ok" if catalog is not None and len(catalog) > 0 else "missing",
        "search": "ok" if getattr(state, "search_service", None) is not None else "missing",
        "admin": "ok" if getattr(state, "admin_service", None) is not None else "missing",
    }

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe.

    Simple check that the service is running.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
