"""Centralized dependency providers for infra clients and the answer service.

Clients are built once per process and handed to the pipeline explicitly, so
tests can swap any of them through FastAPI dependency overrides.
"""
from __future__ import annotations

from functools import lru_cache

from codeanswer.answer.service import AnswerService
from codeanswer.config import settings
from codeanswer.core.telemetry import answer_telemetry
from codeanswer.core.tokenizer import Tokenizer
from codeanswer.infra.answer_api_client import AnswerApiClient
from codeanswer.infra.embedding_client import EmbeddingClient
from codeanswer.infra.file_index_client import FileIndexClient
from codeanswer.infra.qdrant_client import QdrantClient
from codeanswer.infra.semantic import SemanticSearch


@lru_cache(maxsize=1)
def get_embedding_client() -> EmbeddingClient:
    return EmbeddingClient(settings.embeddings_base_url)


@lru_cache(maxsize=1)
def get_qdrant_client(timeout: float | None = None) -> QdrantClient:
    return QdrantClient(
        settings.qdrant_url,
        api_key=settings.qdrant_api_key,
        timeout=timeout or 30.0,
    )


@lru_cache(maxsize=1)
def get_file_index_client() -> FileIndexClient:
    return FileIndexClient(settings.file_index_base_url)


@lru_cache(maxsize=1)
def get_answer_api_client() -> AnswerApiClient:
    return AnswerApiClient(
        settings.answer_api_base,
        timeout=settings.answer_api_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_tokenizer() -> Tokenizer:
    return Tokenizer(settings.tokenizer_encoding)


@lru_cache(maxsize=1)
def get_semantic_search() -> SemanticSearch:
    return SemanticSearch(
        get_embedding_client(),
        get_qdrant_client(),
        collection=settings.qdrant_collection,
    )


@lru_cache(maxsize=1)
def get_answer_service() -> AnswerService:
    return AnswerService(
        search=get_semantic_search(),
        file_index=get_file_index_client(),
        completion_client=get_answer_api_client(),
        tokenizer=get_tokenizer(),
        telemetry=answer_telemetry if answer_telemetry.enabled else None,
        snippet_count=settings.snippet_count,
        search_oversample=settings.search_oversample,
        grow_initial_lines=settings.grow_initial_lines,
        grow_step_lines=settings.grow_step_lines,
        grow_max_lines=settings.grow_max_lines,
        grow_token_limit=settings.grow_token_limit,
        context_window_tokens=settings.context_window_tokens,
        max_answer_tokens=settings.max_answer_tokens,
    )
