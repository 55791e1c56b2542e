"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local ``.env``).
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "restaurants.json"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class DistanceMetric(str, Enum):
    """Distance metric the vector collection is created with.

    Scores returned to clients are derived from distances with a
    metric-specific function, so the metric travels with the index handle.
    """

    COSINE = "cosine"
    EUCLID = "euclid"
    DOT = "dot"


class LLMSettings(BaseSettings):
    """Summarizer LLM configuration.

    Any OpenAI-compatible chat completions endpoint works.
    """

    model_config = SettingsConfigDict(env_prefix="LLM_", populate_by_name=True)

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="LLM API base URL",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Model name to use for summaries",
    )
    api_key: SecretStr = Field(
        default=SecretStr("not-required"),
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"),
        description="API key (shared OPENAI_API_KEY is accepted)",
    )
    timeout: float = Field(
        default=20.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        default=256,
        description="Maximum tokens in the summary",
    )
    temperature: float = Field(
        default=0.3,
        description="Sampling temperature",
    )


class EmbeddingSettings(BaseSettings):
    """Embedding service configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_", populate_by_name=True)

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Embedding API base URL",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    api_key: SecretStr = Field(
        default=SecretStr("not-required"),
        validation_alias=AliasChoices("EMBEDDING_API_KEY", "OPENAI_API_KEY"),
        description="API key (shared OPENAI_API_KEY is accepted)",
    )
    batch_size: int = Field(
        default=32,
        description="Batch size for embedding requests",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration."""

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL (':memory:' for an in-process index)",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    collection_name: str = Field(
        default="restaurants",
        description="Alias that always points at the live collection",
    )
    distance: DistanceMetric = Field(
        default=DistanceMetric.COSINE,
        description="Distance metric for new collections",
    )
    timeout: int = Field(
        default=10,
        description="Request timeout in seconds",
    )


class SearchSettings(BaseSettings):
    """Search pipeline tuning."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for embedding and vector query calls",
    )
    retry_backoff: float = Field(
        default=0.5,
        ge=0.0,
        description="Seconds added to the delay after each failed attempt",
    )
    summary_top_n: int = Field(
        default=3,
        ge=1,
        description="How many top results feed the summary prompt",
    )
    summary_timeout: float = Field(
        default=15.0,
        description="Hard deadline for the summary call in seconds",
    )
    summary_fallback: str = Field(
        default="Unable to generate a summary at this time.",
        description="Summary returned when generation fails",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=5000,
        description="API server port",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    # Catalog and index lifecycle
    catalog_path: Path = Field(
        default=DEFAULT_CATALOG_PATH,
        description="Path to the restaurant catalog JSON file",
    )
    populate_on_startup: bool = Field(
        default=True,
        description="Rebuild the index at startup when it is out of sync",
    )

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
