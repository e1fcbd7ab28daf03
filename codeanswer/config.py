"""Runtime configuration for the codeanswer FastAPI service."""
from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    app_env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    qdrant_url: AnyHttpUrl = "http://qdrant:6333"
    qdrant_api_key: Optional[str] = None
    qdrant_collection: str = "documents"

    embeddings_base_url: AnyHttpUrl = "http://embedding-service:8001"
    file_index_base_url: AnyHttpUrl = "http://file-index:8002"

    answer_api_base: AnyHttpUrl = "http://answer-api:8080"
    answer_api_timeout_seconds: float = 60.0

    langfuse_host: Optional[str] = None
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_answer_dataset: Optional[str] = "answer_queries"
    telemetry_timeout_seconds: float = 2.0

    tokenizer_encoding: str = "gpt2"

    # shortlist shown to the selector and returned to the caller
    snippet_count: int = 15
    search_oversample: int = 4

    grow_initial_lines: int = 40
    grow_step_lines: int = 10
    grow_max_lines: int = 100
    grow_token_limit: int = 2000

    context_window_tokens: int = 4096
    max_answer_tokens: int = 500

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CODEANSWER_",
        env_ignore_empty=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor used across the codebase."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
