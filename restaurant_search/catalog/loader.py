"""Catalog loading from a flat JSON array file."""

import json
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from restaurant_search.catalog.models import Catalog, RestaurantRecord
from restaurant_search.exceptions import CatalogError, ErrorCode
from restaurant_search.logging_config import get_logger

logger = get_logger(__name__)

_RECORDS_ADAPTER = TypeAdapter(list[RestaurantRecord])


class CatalogLoader:
    """Loads the restaurant catalog from a JSON file.

    The file holds a flat array of ``{pageContent, metadata}`` objects.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the catalog loader.

        Args:
            encoding: Text encoding to use when reading the file.
        """
        self.encoding = encoding

    def load(self, source: str | Path) -> Catalog:
        """Load and validate a catalog file.

        Args:
            source: Path to the JSON file.

        Returns:
            Catalog with every record validated.

        Raises:
            CatalogError: If the file is missing, unreadable or malformed.
        """
        path = Path(source) if isinstance(source, str) else source

        if not path.is_file():
            raise CatalogError(
                f"Catalog file not found: {path}",
                code=ErrorCode.CATALOG_NOT_FOUND,
                details={"path": str(path)},
            )

        try:
            raw = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogError(
                f"Failed to read catalog: {path}",
                code=ErrorCode.CATALOG_PARSE_ERROR,
                details={"path": str(path), "error": str(e)},
            ) from e

        catalog = self.loads(raw, source=str(path))
        logger.info(
            f"Loaded {len(catalog)} restaurants",
            extra={"path": str(path)},
        )
        return catalog

    def loads(self, raw: str, source: str = "<string>") -> Catalog:
        """Parse catalog JSON text.

        Raises:
            CatalogError: If the text is not a valid catalog array.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CatalogError(
                f"Catalog is not valid JSON: {e.msg}",
                code=ErrorCode.CATALOG_PARSE_ERROR,
                details={"source": source, "line": e.lineno},
            ) from e

        if not isinstance(data, list):
            raise CatalogError(
                "Catalog must be a JSON array",
                code=ErrorCode.CATALOG_PARSE_ERROR,
                details={"source": source, "type": type(data).__name__},
            )

        try:
            records = _RECORDS_ADAPTER.validate_python(data)
        except PydanticValidationError as e:
            raise CatalogError(
                f"Catalog contains invalid records: {e.error_count()} error(s)",
                code=ErrorCode.CATALOG_PARSE_ERROR,
                details={"source": source, "errors": e.errors(include_url=False)},
            ) from e

        return Catalog(records)
