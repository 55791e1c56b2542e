"""Run the API server: ``python -m restaurant_search``."""

import uvicorn

from restaurant_search.config import get_settings


def main() -> None:
    """Start uvicorn with host and port from settings."""
    settings = get_settings()
    uvicorn.run(
        "restaurant_search.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
