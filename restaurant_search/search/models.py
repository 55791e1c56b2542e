"""Search pipeline data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """Body of ``POST /api/search``.

    ``query`` is optional at the schema level so that a missing query is
    reported as "Query is required" by the search service rather than as a
    generic schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str | None = Field(default=None, description="Free-text search query")
    threshold: float = Field(
        default=0.5,
        allow_inf_nan=False,
        description="Minimum score a result must reach",
    )
    size: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Candidates requested from the index",
    )
    min_stars: int = Field(
        default=0,
        alias="minStars",
        description="Only restaurants with at least this many stars",
    )


class SearchResult(BaseModel):
    """One ranked restaurant match.

    Attributes:
        id: Catalog identifier.
        content: Restaurant description.
        metadata: Restaurant fields (name, cuisine, stars, cost).
        score: Relevance derived from the index distance.
    """

    id: str = Field(description="Catalog identifier")
    content: str = Field(description="Restaurant description")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Restaurant fields")
    score: float = Field(description="Relevance score (higher is better)")


class SearchResponse(BaseModel):
    """Results plus an optional generated summary."""

    results: list[SearchResult] = Field(default_factory=list)
    summary: str = Field(default="", description="Summary of the top results")
