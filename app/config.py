"""Runtime configuration for the gptsearch FastAPI service."""
from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    app_env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8181
    log_level: str = "INFO"

    # Shared secret expected as `Authorization: Bearer <secret>`.
    auth_secret: Optional[str] = None

    embeddings_base_url: AnyHttpUrl = "http://db:4211"
    embeddings_request_timeout: int = 50
    embeddings_timeout_seconds: float = 60.0

    wikipedia_api_url: AnyHttpUrl = "https://en.wikipedia.org/w/api.php"
    wikipedia_contact: Optional[str] = None

    google_api_key: Optional[str] = None
    google_cx: Optional[str] = None
    google_search_url: AnyHttpUrl = "https://www.googleapis.com/customsearch/v1"
    google_result_count: int = 5

    source_timeout_seconds: float = 10.0
    page_timeout_seconds: float = 15.0

    tokenizer_model: str = "gpt-3.5-turbo-16k"
    max_embedding_tokens: int = 8190
    ingestion_limit: int = 25
    ingest_concurrency: int = 8

    static_dir: str = "static"
    privacy_markdown_path: str = "static/privacy.md"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GPTSEARCH_",
        env_ignore_empty=True,
        extra="ignore",
    )

    @property
    def user_agent(self) -> str:
        """Client identification sent to external sources."""

        return f"GPTSearch ({self.wikipedia_contact or 'unknown'})"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor used across the codebase."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
