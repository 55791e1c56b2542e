"""Tests for observability module."""

from httpx import AsyncClient

from restaurant_search.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_embedding_request,
    track_index_rebuild,
    track_llm_request,
    track_search_request,
    track_summary,
)


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    async def test_metrics_endpoint_returns_prometheus_format(self, client: AsyncClient) -> None:
        """Metrics endpoint returns Prometheus format."""
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert b"# HELP" in response.content


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        assert isinstance(get_metrics(), bytes)

    def test_track_llm_request(self) -> None:
        """track_llm_request records request and tokens."""
        track_llm_request(
            model="test-model",
            duration=1.5,
            prompt_tokens=100,
            completion_tokens=50,
            success=True,
        )

        metrics = get_metrics().decode()
        assert "llm_request_duration_seconds" in metrics
        assert "llm_tokens_total" in metrics

    def test_track_embedding_request(self) -> None:
        """track_embedding_request records request."""
        track_embedding_request(
            model="text-embedding-3-small",
            duration=0.1,
            batch_size=10,
            success=True,
        )

        metrics = get_metrics().decode()
        assert "embedding_request_duration_seconds" in metrics
        assert "embedding_batch_size" in metrics

    def test_track_search_request(self) -> None:
        """track_search_request records outcome, result count and top score."""
        track_search_request(duration=0.3, results_returned=4, top_score=0.82)
        track_search_request(duration=0.1, results_returned=0, top_score=None, success=False)

        metrics = get_metrics().decode()
        assert 'search_requests_total{status="success"}' in metrics
        assert 'search_requests_total{status="error"}' in metrics
        assert "search_results_returned" in metrics
        assert "search_top_score" in metrics

    def test_track_summary(self) -> None:
        """Summary outcomes are counted by label."""
        track_summary("fallback")

        assert 'search_summaries_total{outcome="fallback"}' in get_metrics().decode()

    def test_track_index_rebuild(self) -> None:
        """Rebuilds record duration and document count."""
        track_index_rebuild("repopulate", 1.2, document_count=15)

        metrics = get_metrics().decode()
        assert "index_rebuild_duration_seconds" in metrics
        assert "index_document_count 15.0" in metrics


class TestMetricsMiddleware:
    """Tests for MetricsMiddleware."""

    async def test_middleware_records_request_metrics(self, client: AsyncClient) -> None:
        """Middleware records HTTP request metrics."""
        await client.get("/health")

        metrics = get_metrics().decode()
        assert "http_request_duration_seconds" in metrics
        assert 'endpoint="/health"' in metrics

    def test_normalize_endpoint(self) -> None:
        """Paths are grouped to bound label cardinality."""
        normalize = MetricsMiddleware._normalize_endpoint
        assert normalize(None, "/health/ready") == "/health"  # type: ignore[arg-type]
        assert normalize(None, "/api/search/") == "/api/search"  # type: ignore[arg-type]
        assert normalize(None, "/favicon.ico") == "other"  # type: ignore[arg-type]
