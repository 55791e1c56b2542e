"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from restaurant_search.api.app import app
from restaurant_search.catalog.models import Catalog, RestaurantMetadata, RestaurantRecord
from restaurant_search.config import DistanceMetric
from restaurant_search.embeddings.models import EmbeddingResult
from restaurant_search.embeddings.service import EmbeddingService
from restaurant_search.llm.client import LLMClient
from restaurant_search.llm.models import GenerationResult


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    The lifespan does not run under ``ASGITransport``, so no upstream
    services are contacted. Tests that need services put them on
    ``app.state`` themselves.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    for name in ("catalog", "search_service", "admin_service"):
        if hasattr(app.state, name):
            delattr(app.state, name)


@pytest.fixture
def catalog() -> Catalog:
    """Small three-restaurant catalog."""
    return Catalog(
        [
            RestaurantRecord(
                page_content="Cheap street tacos and fresh salsa.",
                metadata=RestaurantMetadata(name="Taco Stand", cuisine="Mexican", stars=4, cost=1),
            ),
            RestaurantRecord(
                page_content="Hand-rolled pasta and a long wine list.",
                metadata=RestaurantMetadata(name="Trattoria", cuisine="Italian", stars=5, cost=3),
            ),
            RestaurantRecord(
                page_content="Greasy burgers and milkshakes.",
                metadata=RestaurantMetadata(name="Burger Hut", cuisine="American", stars=2, cost=1),
            ),
        ]
    )


def fake_embedding(text: str, dimensions: int = 4) -> list[float]:
    """Deterministic non-zero vector for a text."""
    seed = sum(ord(c) for c in text)
    return [float((seed * (i + 3)) % 17 + 1) for i in range(dimensions)]


@pytest.fixture
def embedding_service() -> AsyncMock:
    """Embedding service mock returning deterministic 4-d vectors."""
    service = AsyncMock(spec=EmbeddingService)
    service.dimensions = 4
    service.model_name = "test-embed"

    async def embed(text: str) -> EmbeddingResult:
        vector = fake_embedding(text)
        return EmbeddingResult(text=text, embedding=vector, model="test-embed", dimensions=4)

    async def embed_batch(texts: list[str]) -> list[EmbeddingResult]:
        return [await embed(t) for t in texts]

    service.embed.side_effect = embed
    service.embed_batch.side_effect = embed_batch
    return service


@pytest.fixture
def llm_client() -> AsyncMock:
    """LLM client mock that returns a fixed summary."""
    llm = AsyncMock(spec=LLMClient)
    llm.model_name = "test-llm"
    llm.generate_text.return_value = GenerationResult(
        content="  Try the tacos.  ",
        model="test-llm",
        finish_reason="stop",
        prompt_tokens=10,
        completion_tokens=5,
        total_tokens=15,
    )
    return llm


@pytest.fixture
def metric() -> DistanceMetric:
    """Default distance metric."""
    return DistanceMetric.COSINE
