"""Tests for the HTTP API routes."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from restaurant_search.admin.models import IndexStatus
from restaurant_search.admin.service import AdminService
from restaurant_search.api.app import app
from restaurant_search.catalog.models import Catalog
from restaurant_search.config import DistanceMetric, SearchSettings
from restaurant_search.exceptions import EmbeddingError, LLMError, VectorStoreError
from restaurant_search.search.service import SearchService
from restaurant_search.search.summarizer import Summarizer
from restaurant_search.vectorstore.handle import IndexHandle, IndexHandleProvider
from restaurant_search.vectorstore.models import QueryMatch
from restaurant_search.vectorstore.service import VectorIndex


@pytest.fixture
def vector_index() -> AsyncMock:
    """Vector index mock returning two matches."""
    index = AsyncMock(spec=VectorIndex)
    index.query.return_value = [
        QueryMatch(
            id="id0",
            document="Cheap street tacos and fresh salsa.",
            metadata={"name": "Taco Stand", "cuisine": "Mexican", "stars": 4, "cost": 1},
            distance=0.2,
        ),
        QueryMatch(
            id="id2",
            document="Greasy burgers and milkshakes.",
            metadata={"name": "Burger Hut", "cuisine": "American", "stars": 2, "cost": 1},
            distance=0.7,
        ),
    ]
    return index


@pytest.fixture
def search_service(
    embedding_service: AsyncMock,
    vector_index: AsyncMock,
    llm_client: AsyncMock,
) -> SearchService:
    """Search service over mocked upstreams."""
    settings = SearchSettings(retry_attempts=1, retry_backoff=0.0)
    handles = IndexHandleProvider(
        "restaurants",
        IndexHandle(collection="restaurants-a", metric=DistanceMetric.COSINE),
    )
    return SearchService(
        embedding_service,
        vector_index,
        handles,
        Summarizer(llm_client, settings),
        settings,
    )


@pytest.fixture
def wired(catalog: Catalog, search_service: SearchService) -> AsyncMock:
    """Put services on app state; returns the admin mock."""
    admin = AsyncMock(spec=AdminService)
    app.state.catalog = catalog
    app.state.search_service = search_service
    app.state.admin_service = admin
    return admin


class TestRestaurantsEndpoint:
    """Tests for GET /api/restaurants."""

    async def test_lists_catalog(self, client: AsyncClient, wired: AsyncMock) -> None:
        """Catalog is returned in wire format."""
        response = await client.get("/api/restaurants")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 3
        assert data[0]["pageContent"] == "Cheap street tacos and fresh salsa."
        assert data[0]["metadata"]["name"] == "Taco Stand"

    async def test_unwired_state(self, client: AsyncClient) -> None:
        """Missing services produce a generic 500."""
        response = await client.get("/api/restaurants")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestSearchEndpoint:
    """Tests for POST /api/search."""

    async def test_search_returns_results_and_summary(
        self, client: AsyncClient, wired: AsyncMock
    ) -> None:
        """Matches above threshold are returned with a summary."""
        response = await client.post("/api/search", json={"query": "cheap tacos"})

        assert response.status_code == 200
        data = response.json()
        assert [r["id"] for r in data["results"]] == ["id0"]
        assert data["results"][0]["score"] == pytest.approx(0.8)
        assert data["results"][0]["content"].startswith("Cheap street tacos")
        assert data["summary"] == "Try the tacos."

    async def test_parameters_forwarded(
        self, client: AsyncClient, wired: AsyncMock, vector_index: AsyncMock
    ) -> None:
        """size and minStars reach the index query."""
        response = await client.post(
            "/api/search",
            json={"query": "tacos", "size": "3", "minStars": 4, "threshold": 0.1},
        )

        assert response.status_code == 200
        call = vector_index.query.call_args
        assert call.kwargs["top_k"] == 3
        assert call.kwargs["metadata_filter"].gte == {"stars": 4}
        assert len(response.json()["results"]) == 2

    @pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}])
    async def test_missing_query(
        self,
        client: AsyncClient,
        wired: AsyncMock,
        embedding_service: AsyncMock,
        body: dict,
    ) -> None:
        """Missing query is a 400 and nothing is embedded."""
        response = await client.post("/api/search", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Query is required"}
        embedding_service.embed.assert_not_called()

    async def test_missing_body(
        self, client: AsyncClient, wired: AsyncMock, embedding_service: AsyncMock
    ) -> None:
        """A request without a body is treated as a missing query."""
        response = await client.post("/api/search")

        assert response.status_code == 400
        assert response.json() == {"error": "Query is required"}
        embedding_service.embed.assert_not_called()

    @pytest.mark.parametrize(
        "body",
        [
            {"query": "x", "threshold": "abc"},
            {"query": "x", "size": "ten"},
            {"query": "x", "size": 0},
            {"query": "x", "minStars": "many"},
        ],
    )
    async def test_invalid_parameters(
        self, client: AsyncClient, wired: AsyncMock, body: dict
    ) -> None:
        """Bad numeric parameters are rejected with 400."""
        response = await client.post("/api/search", json=body)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request: ")

    async def test_nan_threshold_rejected(self, client: AsyncClient, wired: AsyncMock) -> None:
        """NaN cannot sneak in as a threshold."""
        response = await client.post(
            "/api/search",
            content=b'{"query": "x", "threshold": NaN}',
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert "Invalid request" in response.json()["error"]

    async def test_summary_failure_still_200(
        self, client: AsyncClient, wired: AsyncMock, llm_client: AsyncMock
    ) -> None:
        """Summarizer failure degrades to the fallback text."""
        llm_client.generate_text.side_effect = LLMError("rate limited")

        response = await client.post("/api/search", json={"query": "tacos"})

        assert response.status_code == 200
        data = response.json()
        assert len(data["results"]) == 1
        assert data["summary"] == "Unable to generate a summary at this time."

    async def test_embedding_failure_is_500(
        self, client: AsyncClient, wired: AsyncMock, embedding_service: AsyncMock
    ) -> None:
        """Upstream failures are reported generically."""
        embedding_service.embed.side_effect = EmbeddingError("secret upstream detail")

        response = await client.post("/api/search", json={"query": "tacos"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    async def test_vector_failure_is_500(
        self, client: AsyncClient, wired: AsyncMock, vector_index: AsyncMock
    ) -> None:
        """Index failures are reported generically."""
        vector_index.query.side_effect = VectorStoreError("down")

        response = await client.post("/api/search", json={"query": "tacos"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    async def test_unexpected_error_is_500(
        self, wired: AsyncMock, vector_index: AsyncMock
    ) -> None:
        """Unexpected exceptions never leak their message."""
        vector_index.query.side_effect = RuntimeError("kaboom")
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.post("/api/search", json={"query": "tacos"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

        for name in ("catalog", "search_service", "admin_service"):
            delattr(app.state, name)


class TestAdminEndpoints:
    """Tests for /api/admin routes."""

    async def test_status(self, client: AsyncClient, wired: AsyncMock) -> None:
        """Status is returned in camelCase."""
        wired.status.return_value = IndexStatus(
            document_count=0, restaurants_in_json=3, needs_repopulate=True
        )

        response = await client.get("/api/admin/status")

        assert response.status_code == 200
        assert response.json() == {
            "documentCount": 0,
            "restaurantsInJson": 3,
            "needsRepopulate": True,
        }

    async def test_clear(self, client: AsyncClient, wired: AsyncMock) -> None:
        """Clear returns a message."""
        wired.clear.return_value = "Index cleared successfully"

        response = await client.post("/api/admin/clear")

        assert response.status_code == 200
        assert response.json() == {"message": "Index cleared successfully"}

    async def test_repopulate(self, client: AsyncClient, wired: AsyncMock) -> None:
        """Repopulate returns a message."""
        wired.repopulate.return_value = "Index repopulated with 3 restaurants"

        response = await client.post("/api/admin/repopulate")

        assert response.status_code == 200
        assert response.json()["message"] == "Index repopulated with 3 restaurants"

    async def test_repopulate_failure(self, client: AsyncClient, wired: AsyncMock) -> None:
        """Upstream failures during admin operations are 500."""
        wired.repopulate.side_effect = EmbeddingError("down")

        response = await client.post("/api/admin/repopulate")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestCors:
    """Tests for CORS headers."""

    async def test_cors_allows_any_origin(self, client: AsyncClient) -> None:
        """Browsers on other origins may call the API."""
        response = await client.get("/health", headers={"Origin": "http://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"
