"""Admin data models."""

from pydantic import BaseModel, ConfigDict, Field


class IndexStatus(BaseModel):
    """Sync state between the catalog and the live vector collection."""

    model_config = ConfigDict(populate_by_name=True)

    document_count: int = Field(alias="documentCount", ge=0)
    restaurants_in_json: int = Field(alias="restaurantsInJson", ge=0)
    needs_repopulate: bool = Field(alias="needsRepopulate")


class AdminMessage(BaseModel):
    """Acknowledgement returned by admin operations."""

    message: str
