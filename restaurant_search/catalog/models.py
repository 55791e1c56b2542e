"""Restaurant catalog data models."""

from collections.abc import Iterator, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RestaurantMetadata(BaseModel):
    """Structured fields stored alongside each restaurant's vector.

    Attributes:
        name: Restaurant name.
        cuisine: Cuisine label.
        stars: Rating from 0 to 5.
        cost: Price level from 1 (cheap) to 4 (expensive).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Restaurant name")
    cuisine: str = Field(description="Cuisine label")
    stars: int = Field(ge=0, le=5, description="Star rating")
    cost: int = Field(ge=1, le=4, description="Price level")


class RestaurantRecord(BaseModel):
    """A single catalog entry.

    Attributes:
        page_content: Free-text description that gets embedded
            (``pageContent`` on the wire).
        metadata: Structured restaurant fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_content: str = Field(alias="pageContent", description="Description text")
    metadata: RestaurantMetadata = Field(description="Restaurant fields")


class Catalog:
    """Immutable, positionally-identified list of restaurants.

    A record's identity is its index in the source file (``id0``, ``id1``...),
    so reordering the file changes identities.
    """

    def __init__(self, records: Sequence[RestaurantRecord]) -> None:
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RestaurantRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> RestaurantRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[RestaurantRecord, ...]:
        """All records in catalog order."""
        return self._records

    @staticmethod
    def record_id(index: int) -> str:
        """Identifier used for the record at ``index``."""
        return f"id{index}"

    def ids(self) -> list[str]:
        """Identifiers for every record, in catalog order."""
        return [self.record_id(i) for i in range(len(self._records))]

    def documents(self) -> list[str]:
        """Texts to embed, in catalog order."""
        return [record.page_content for record in self._records]

    def metadatas(self) -> list[dict[str, Any]]:
        """Metadata payloads, in catalog order."""
        return [record.metadata.model_dump() for record in self._records]
