"""Vector store data models."""

from typing import Any

from pydantic import BaseModel, Field


class IndexedDocument(BaseModel):
    """The persisted form of one catalog record in the vector index.

    Attributes:
        id: Catalog identifier (``id{i}``).
        embedding: The embedding vector.
        metadata: Restaurant metadata, stored as filterable payload.
        document: The embedded text.
    """

    id: str = Field(description="Catalog record identifier")
    embedding: list[float] = Field(description="Embedding vector")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Filterable metadata payload",
    )
    document: str = Field(description="Embedded text")


class QueryMatch(BaseModel):
    """One nearest-neighbour hit, ranked by ascending distance.

    Attributes:
        id: Catalog identifier.
        document: Stored text.
        metadata: Stored metadata.
        distance: Distance to the query under the collection's metric.
    """

    id: str = Field(description="Catalog record identifier")
    document: str = Field(default="", description="Stored text")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Stored metadata",
    )
    distance: float = Field(description="Distance to the query vector")


class MetadataFilter(BaseModel):
    """Predicate over payload fields, applied inside the index query.

    Attributes:
        equals: Field must equal the given value.
        gte: Field must be greater than or equal to the given number.
    """

    equals: dict[str, Any] = Field(default_factory=dict)
    gte: dict[str, float] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        """True when the filter matches every document."""
        return not self.equals and not self.gte
