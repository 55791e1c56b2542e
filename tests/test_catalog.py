"""Tests for catalog loading."""

import json
from pathlib import Path

import pytest

from restaurant_search.catalog.loader import CatalogLoader
from restaurant_search.catalog.models import Catalog, RestaurantRecord
from restaurant_search.config import DEFAULT_CATALOG_PATH
from restaurant_search.exceptions import CatalogError, ErrorCode

VALID_RECORD = {
    "pageContent": "Cheap street tacos.",
    "metadata": {"name": "Taco Stand", "cuisine": "Mexican", "stars": 4, "cost": 1},
}


class TestRestaurantRecord:
    """Tests for RestaurantRecord model."""

    def test_parses_wire_format(self) -> None:
        """pageContent maps to page_content."""
        record = RestaurantRecord.model_validate(VALID_RECORD)
        assert record.page_content == "Cheap street tacos."
        assert record.metadata.stars == 4

    def test_serializes_with_alias(self) -> None:
        """Records serialize back to pageContent."""
        record = RestaurantRecord.model_validate(VALID_RECORD)
        assert record.model_dump(by_alias=True) == VALID_RECORD

    def test_stars_out_of_range(self) -> None:
        """Stars above 5 are rejected."""
        bad = {**VALID_RECORD, "metadata": {**VALID_RECORD["metadata"], "stars": 6}}
        with pytest.raises(ValueError):
            RestaurantRecord.model_validate(bad)


class TestCatalog:
    """Tests for Catalog."""

    def test_positional_ids(self, catalog: Catalog) -> None:
        """Ids follow catalog order."""
        assert catalog.ids() == ["id0", "id1", "id2"]

    def test_parallel_lists(self, catalog: Catalog) -> None:
        """Documents and metadata line up with ids."""
        assert len(catalog.documents()) == len(catalog.metadatas()) == len(catalog)
        assert catalog.metadatas()[1]["name"] == "Trattoria"
        assert catalog.documents()[0].startswith("Cheap street tacos")

    def test_indexing_and_iteration(self, catalog: Catalog) -> None:
        """Catalog behaves like a read-only sequence."""
        assert catalog[2].metadata.name == "Burger Hut"
        assert [r.metadata.name for r in catalog][0] == "Taco Stand"


class TestCatalogLoader:
    """Tests for CatalogLoader."""

    def test_load_bundled_catalog(self) -> None:
        """The bundled catalog loads and is non-empty."""
        catalog = CatalogLoader().load(DEFAULT_CATALOG_PATH)
        assert len(catalog) > 0
        assert catalog[0].metadata.name == "Taqueria El Sol"

    def test_load_file(self, tmp_path: Path) -> None:
        """A valid file loads."""
        path = tmp_path / "restaurants.json"
        path.write_text(json.dumps([VALID_RECORD]))

        catalog = CatalogLoader().load(path)

        assert len(catalog) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing file raises not-found."""
        with pytest.raises(CatalogError) as exc_info:
            CatalogLoader().load(tmp_path / "nope.json")
        assert exc_info.value.code == ErrorCode.CATALOG_NOT_FOUND

    def test_invalid_json(self) -> None:
        """Malformed JSON raises parse error."""
        with pytest.raises(CatalogError) as exc_info:
            CatalogLoader().loads("[{")
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR

    def test_not_an_array(self) -> None:
        """Top-level object is rejected."""
        with pytest.raises(CatalogError) as exc_info:
            CatalogLoader().loads(json.dumps(VALID_RECORD))
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR

    def test_invalid_record(self) -> None:
        """Records missing fields are rejected."""
        with pytest.raises(CatalogError) as exc_info:
            CatalogLoader().loads(json.dumps([{"pageContent": "x"}]))
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR

    def test_empty_array(self) -> None:
        """An empty catalog is valid."""
        assert len(CatalogLoader().loads("[]")) == 0
