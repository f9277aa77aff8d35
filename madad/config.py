"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Centralised settings - no hardcoded values anywhere else."""

    # Database
    database_url: str = Field(..., env="DATABASE_URL")

    # Google AI (embedding provider)
    google_api_key: str = Field(..., env="GOOGLE_API_KEY")
    embedding_model: str = Field("text-embedding-004", env="EMBEDDING_MODEL")
    embedding_dimensions: int = Field(768, env="EMBEDDING_DIMENSIONS")
    embedding_cache_ttl: int = Field(3600, env="EMBEDDING_CACHE_TTL")
    embedding_cache_size: int = Field(512, env="EMBEDDING_CACHE_SIZE")

    # Vector index
    chroma_path: str = Field("./chroma_data", env="CHROMA_PATH")
    chroma_collection: str = Field("restaurants", env="CHROMA_COLLECTION")

    # Search tuning
    search_field_limit: int = Field(15, env="SEARCH_FIELD_LIMIT")
    search_description_limit: int = Field(10, env="SEARCH_DESCRIPTION_LIMIT")
    search_result_limit: int = Field(30, env="SEARCH_RESULT_LIMIT")
    semantic_max_limit: int = Field(100, env="SEMANTIC_MAX_LIMIT")

    # Score aggregation
    score_recalc_max_attempts: int = Field(3, env="SCORE_RECALC_MAX_ATTEMPTS")
    score_recalc_retry_delay: float = Field(0.5, env="SCORE_RECALC_RETRY_DELAY")

    # Listings
    review_page_size: int = Field(50, env="REVIEW_PAGE_SIZE")
    featured_limit: int = Field(8, env="FEATURED_LIMIT")

    # Security
    allowed_origins: str = Field(
        "http://localhost:3000",
        env="ALLOWED_ORIGINS",
    )

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
