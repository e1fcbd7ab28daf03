"""Async client for the query embedding service."""
from __future__ import annotations

from typing import List, Sequence

import httpx


class EmbeddingClient:
    """Simple HTTP client for the embedding service used at query time."""

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout

    async def embed_texts(
        self,
        texts: Sequence[str],
        *,
        model_name: str | None = None,
    ) -> List[List[float]]:
        """Embed a short batch of texts in a single request."""

        if not texts:
            raise ValueError("at least one text is required for embeddings")

        payload: dict[str, object] = {"texts": list(texts)}
        if model_name:
            payload["model"] = model_name

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(f"{self.base_url}/api/v1/embeddings", json=payload)
            response.raise_for_status()
            data = response.json()

        embeddings = data.get("embeddings")
        if not isinstance(embeddings, list) or len(embeddings) != len(texts):
            raise RuntimeError("embedding service returned malformed payload")
        return embeddings
